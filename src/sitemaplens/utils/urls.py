# SitemapLens — URL utilities: URI validation and origin checks
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import re
from typing import Tuple
from urllib.parse import SplitResult, urlsplit

from ..errors import URIParseError


Origin = Tuple[str, str]

_FORBIDDEN = re.compile(r"[\x00-\x20\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def parse_uri(url: str) -> SplitResult:
	"""Split `url`, rejecting values no HTTP client could request.

	Raises URIParseError for control characters or spaces, malformed percent
	escapes, bad IPv6 literals and invalid ports.
	"""
	if not isinstance(url, str):
		raise URIParseError(f"location must be a string, not {type(url).__name__}")
	if _FORBIDDEN.search(url):
		raise URIParseError("location contains whitespace or control characters", url)
	if _BAD_ESCAPE.search(url):
		raise URIParseError("location contains an invalid percent escape", url)
	try:
		p = urlsplit(url)
		# .port validates the number lazily
		p.port
	except ValueError as e:
		raise URIParseError(f"invalid URI: {e}", url) from e
	return p


def origin_of(url: str) -> Origin:
	"""Return the (scheme, host[:port]) pair of `url`, lower-cased, userinfo dropped."""
	p = parse_uri(url)
	host = p.netloc.rpartition("@")[2].lower()
	return p.scheme.lower(), host


__all__ = ["Origin", "parse_uri", "origin_of"]
