# SitemapLens — Networking utilities (hardened requests session)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from urllib.parse import urljoin, urlsplit

import requests
from requests.adapters import HTTPAdapter


logger = logging.getLogger(__name__)


class HardenedSession(requests.Session):
	"""Session that refuses to follow redirects from https to plain http.

	The redirect response itself is returned instead, so callers see it as a
	non-2xx status.
	"""

	def get_redirect_target(self, resp):
		target = super().get_redirect_target(resp)
		if target and urlsplit(resp.url).scheme == "https":
			if urlsplit(urljoin(resp.url, target)).scheme != "https":
				logger.warning("Not following https -> http redirect from %s", resp.url)
				return None
		return target


def build_session(user_agent: str, max_redirects: int = 10, pool_maxsize: int = 32) -> requests.Session:
	"""Build the default HTTP client used to fetch sitemaps.

	No retries are mounted: wrap or replace the session to add them, e.g. an
	HTTPAdapter with urllib3's Retry. The pool is sized for parallel fetches
	against a single host.
	"""
	s = HardenedSession()
	s.headers.update(
		{
			"User-Agent": user_agent,
			"Accept": "application/xml,text/xml;q=0.9,*/*;q=0.8",
		}
	)
	s.max_redirects = max_redirects
	adapter = HTTPAdapter(pool_connections=4, pool_maxsize=pool_maxsize, max_retries=0)
	s.mount("http://", adapter)
	s.mount("https://", adapter)
	return s
