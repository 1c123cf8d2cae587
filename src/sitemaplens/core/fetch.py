# SitemapLens — Sitemap fetching: root resolution and parallel index fan-out
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import copy
import logging
import threading
from typing import Callable, List, Optional, Sequence

import requests

from .group import TaskGroup
from .models import DocumentKind, ParsedDocument, SitemapRef, URLEntry
from .parse import parse_chunks
from ..config import settings
from ..errors import (
	HTTPStatusError,
	OriginMismatchError,
	SitemapError,
	TransportError,
	UnexpectedDocumentTypeError,
)
from ..utils.net import build_session
from ..utils.urls import origin_of, parse_uri


logger = logging.getLogger(__name__)

# Bytes of a non-2xx body kept for the error message
MAX_ERROR_BODY = 4096

# (ref, entries); ref is None when the root document itself was a <urlset>
LeafSetCallback = Callable[[Optional[SitemapRef], Sequence[URLEntry]], None]
RefFilter = Callable[[List[SitemapRef]], Sequence[SitemapRef]]

_UNSET = object()
_default_client: Optional[requests.Session] = None
_default_client_lock = threading.Lock()


def default_client() -> requests.Session:
	"""Process-wide hardened session, created on first use."""
	global _default_client
	with _default_client_lock:
		if _default_client is None:
			_default_client = build_session(
				user_agent=settings.user_agent,
				max_redirects=settings.max_redirects,
				pool_maxsize=settings.pool_maxsize,
			)
		return _default_client


class FetchOptions:
	"""Knobs for resolve / resolve_all.

	http_client: anything with `get(url, stream=, timeout=)` returning a
		requests-style response; default is default_client().
	max_parallelism: child fetches in flight at once; None or < 1 falls back to
		settings (CPU count by default).
	filter: narrows the child refs of an index before anything is fetched.
	on_leaf_set: called once per <urlset> document found.
	timeout: passed through to the client; None disables it. Defaults to
		settings.timeout with the default client only; a caller-supplied client
		gets None unless a timeout is given explicitly.
	"""

	def __init__(
		self,
		http_client=None,
		max_parallelism: Optional[int] = None,
		filter: Optional[RefFilter] = None,
		on_leaf_set: Optional[LeafSetCallback] = None,
		timeout=_UNSET,
		chunk_size: Optional[int] = None,
	):
		if timeout is _UNSET:
			timeout = settings.timeout if http_client is None else None
		self.http_client = http_client if http_client is not None else default_client()
		self.max_parallelism = settings.parallelism(max_parallelism)
		self.filter = filter
		self.on_leaf_set = on_leaf_set
		self.timeout = timeout
		self.chunk_size = chunk_size or settings.chunk_size

	def replace(self, **changes) -> "FetchOptions":
		clone = copy.copy(self)
		for key, value in changes.items():
			if not hasattr(clone, key):
				raise TypeError(f"unknown option: {key}")
			setattr(clone, key, value)
		return clone


def _body_snippet(resp, location: str) -> str:
	buf = b""
	try:
		for chunk in resp.iter_content(chunk_size=1024):
			buf += chunk
			if len(buf) >= MAX_ERROR_BODY:
				break
	except requests.RequestException as e:
		# the status code is the error; the body is only context
		logger.debug("Could not read error body from %s: %s", location, e)
	buf = buf[:MAX_ERROR_BODY]
	try:
		return buf.decode(getattr(resp, "encoding", None) or "utf-8", errors="replace")
	except LookupError:
		# charset from the server's Content-Type is not a known codec
		return buf.decode("utf-8", errors="replace")


def fetch_document(
	location: str,
	options: Optional[FetchOptions] = None,
	cancelled: Optional[threading.Event] = None,
) -> ParsedDocument:
	"""GET `location` and parse the body as it streams in.

	The response is always closed. When `cancelled` is set mid-download the
	body read stops at the next chunk.
	"""
	options = options or FetchOptions()
	logger.debug("Fetching %s", location)
	try:
		resp = options.http_client.get(location, stream=True, timeout=options.timeout)
	except requests.RequestException as e:
		raise TransportError(f"request failed: {e}", location) from e
	try:
		if not 200 <= resp.status_code < 300:
			raise HTTPStatusError(location, resp.status_code, _body_snippet(resp, location))
		try:
			return parse_chunks(resp.iter_content(chunk_size=options.chunk_size), cancelled=cancelled)
		except requests.RequestException as e:
			raise TransportError(f"reading body failed: {e}", location) from e
		except SitemapError as e:
			if e.location is None:
				e.location = location
			raise
	finally:
		resp.close()


def resolve(root_location: str, options: FetchOptions) -> None:
	"""Resolve a sitemap into its <urlset> documents, streaming them to a callback.

	`options.on_leaf_set(ref, entries)` runs once for a <urlset> root (ref is
	None) or once per child of a <sitemapindex> root, in completion order and
	possibly from worker threads. Children must share the root's scheme and
	host and must be <urlset> documents. The first failure cancels the
	remaining children and is raised; callbacks already made are not undone.
	"""
	on_leaf_set = options.on_leaf_set
	if on_leaf_set is None:
		raise ValueError("resolve requires options.on_leaf_set")
	parse_uri(root_location)

	doc = fetch_document(root_location, options)
	if doc.is_leaf:
		logger.info("Resolved %s: %d URLs", root_location, len(doc.leaf))
		on_leaf_set(None, doc.leaf.entries)
		return

	root_origin = origin_of(root_location)
	refs = list(doc.index.refs)
	if options.filter is not None:
		refs = list(options.filter(refs))
	logger.info(
		"Resolving %s: %d of %d child sitemaps, parallelism=%d",
		root_location,
		len(refs),
		len(doc.index),
		options.max_parallelism,
	)

	with TaskGroup(options.max_parallelism) as group:

		def unit(ref: SitemapRef) -> None:
			try:
				origin = origin_of(ref.location)
				if origin != root_origin:
					raise OriginMismatchError(ref.location, root_origin, origin)
				child = fetch_document(ref.location, options, cancelled=group.cancelled)
				if not child.is_leaf:
					raise UnexpectedDocumentTypeError(DocumentKind.LEAF.value, child.kind.value, ref.location)
			except SitemapError as e:
				if not group.cancelled.is_set():
					logger.warning("Child sitemap failed, cancelling the rest: %s", e)
				raise
			if group.cancelled.is_set():
				return
			on_leaf_set(ref, child.leaf.entries)

		for ref in refs:
			if not group.go(unit, ref):
				break
		group.wait()


def resolve_all(root_location: str, options: Optional[FetchOptions] = None) -> List[URLEntry]:
	"""Collect every URL entry reachable from `root_location`.

	A <urlset> root keeps document order. Across the children of an index the
	order is not guaranteed (it follows fetch completion). Any error is
	raised and nothing is returned. A caller-supplied on_leaf_set still runs
	for each document.
	"""
	options = options or FetchOptions()
	user_callback = options.on_leaf_set
	urls: List[URLEntry] = []
	lock = threading.Lock()

	def collect(ref: Optional[SitemapRef], entries: Sequence[URLEntry]) -> None:
		if user_callback is not None:
			user_callback(ref, entries)
		with lock:
			urls.extend(entries)

	resolve(root_location, options.replace(on_leaf_set=collect))
	return urls


__all__ = [
	"MAX_ERROR_BODY",
	"FetchOptions",
	"default_client",
	"fetch_document",
	"resolve",
	"resolve_all",
]
