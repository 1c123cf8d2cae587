# SitemapLens — Streaming sitemap parser (<urlset> / <sitemapindex>)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import io
import logging
import threading
import xml.etree.ElementTree as ET
from typing import BinaryIO, Dict, Iterable, List, Optional, Union
from xml.parsers.expat import errors as expat_errors

from defusedxml import DefusedXmlException
from defusedxml.ElementTree import DefusedXMLParser, ParseError

from .models import (
	ChangeFrequency,
	DocumentKind,
	MAX_ENTRIES,
	IndexSet,
	LeafSet,
	ParsedDocument,
	SitemapRef,
	URLEntry,
)
from .w3cdate import W3CDateTime, parse_w3c_datetime
from ..errors import MalformedDocumentError, UnrecognizedDocumentError
from ..utils.io import ChunkReader


logger = logging.getLogger(__name__)

_NO_ELEMENTS = expat_errors.codes[expat_errors.XML_ERROR_NO_ELEMENTS]
_JUNK_AFTER_ROOT = expat_errors.codes[expat_errors.XML_ERROR_JUNK_AFTER_DOC_ELEMENT]


def local_name(tag: str) -> str:
	"""Strip the `{namespace}` part ElementTree puts in front of a tag."""
	if tag[:1] == "{":
		return tag.rsplit("}", 1)[1]
	return tag


def _text(elem: ET.Element) -> str:
	return (elem.text or "").strip()


def _lastmod(elem: ET.Element) -> Optional[W3CDateTime]:
	raw = _text(elem)
	if not raw:
		return None
	try:
		return parse_w3c_datetime(raw)
	except ValueError as e:
		raise MalformedDocumentError(f"invalid <lastmod> {raw!r}: {e}") from e


def _require_loc(loc: Optional[str], parent: str) -> str:
	if not loc:
		raise MalformedDocumentError(f"<{parent}> is missing a non-empty <loc>")
	return loc


def _decode_url(elem: ET.Element) -> URLEntry:
	loc = None
	lastmod = None
	changefreq = None
	priority = None
	alternates: Dict[str, str] = {}
	for child in elem:
		name = local_name(child.tag)
		if name == "loc":
			loc = _text(child)
		elif name == "lastmod":
			lastmod = _lastmod(child)
		elif name == "changefreq":
			raw = _text(child)
			changefreq = ChangeFrequency.coerce(raw) if raw else None
		elif name == "priority":
			raw = _text(child)
			if raw:
				try:
					priority = float(raw)
				except ValueError as e:
					raise MalformedDocumentError(f"invalid <priority> {raw!r}") from e
		elif name == "link":
			# only rel="alternate" links name localized versions
			if child.get("rel") == "alternate":
				alternates[child.get("hreflang", "")] = child.get("href", "")
	return URLEntry(
		location=_require_loc(loc, "url"),
		last_modified=lastmod,
		change_frequency=changefreq,
		priority=priority,
		alternates=alternates,
	)


def _decode_sitemap(elem: ET.Element) -> SitemapRef:
	loc = None
	lastmod = None
	for child in elem:
		name = local_name(child.tag)
		if name == "loc":
			loc = _text(child)
		elif name == "lastmod":
			lastmod = _lastmod(child)
	return SitemapRef(location=_require_loc(loc, "sitemap"), last_modified=lastmod)


# root name -> (child name, child decoder, container)
_ROOTS: Dict[str, tuple] = {
	DocumentKind.LEAF.value: ("url", _decode_url, LeafSet),
	DocumentKind.INDEX.value: ("sitemap", _decode_sitemap, IndexSet),
}


class _EventTarget:
	"""Parser target that builds elements and queues (event, element) pairs."""

	def __init__(self) -> None:
		self._builder = ET.TreeBuilder()
		self.events: List[tuple] = []

	def start(self, tag, attrib):
		elem = self._builder.start(tag, attrib)
		self.events.append(("start", elem))
		return elem

	def end(self, tag):
		elem = self._builder.end(tag)
		self.events.append(("end", elem))
		return elem

	def data(self, text):
		self._builder.data(text)

	def close(self):
		return None


class _RootScanner:
	"""Event-driven scan over the top-level elements of one stream.

	Expat accepts a single document element. When it reports junk after the
	document element, scanning resumes with a fresh parser at the byte where
	the next top-level construct begins, so unknown elements before a
	<urlset>/<sitemapindex> are skipped. Only bytes fed since the current
	top-level element closed are retained for that restart.
	"""

	def __init__(self) -> None:
		self.result: Optional[ParsedDocument] = None
		self.seen_root = False
		self._root: Optional[ET.Element] = None
		self._layout: Optional[tuple] = None
		self._items: List[Union[URLEntry, SitemapRef]] = []
		self._depth = 0
		self._restart()

	def _restart(self) -> None:
		self._target = _EventTarget()
		self._parser = DefusedXMLParser(target=self._target)
		self._fed = 0
		self._tail = b""
		self._tail_at = 0
		self._in_epilog = False

	def _drain(self) -> None:
		events, self._target.events = self._target.events, []
		for event, elem in events:
			if event == "start":
				if self._depth == 0:
					self.seen_root = True
					self._root = elem
					name = local_name(elem.tag)
					self._layout = _ROOTS.get(name) if self.result is None else None
					if self._layout is None:
						logger.debug("Skipping unrecognized element <%s>", name)
					self._items = []
				self._depth += 1
				continue

			self._depth -= 1
			if self._depth == 1:
				if self._layout is not None and local_name(elem.tag) == self._layout[0]:
					self._items.append(self._layout[1](elem))
				self._root.clear()
			elif self._depth == 0:
				if self._layout is not None:
					kind = DocumentKind(local_name(elem.tag))
					self.result = ParsedDocument(kind, self._layout[2](tuple(self._items)))
					logger.debug("Decoded <%s> with %d children", kind.value, len(self._items))
					if kind == DocumentKind.LEAF and len(self._items) > MAX_ENTRIES:
						logger.warning("<urlset> has %d entries, over the protocol limit of %d", len(self._items), MAX_ENTRIES)
				self._layout = None
				self._items = []
				self._root = None
				elem.clear()
				self._in_epilog = True

	def push(self, data: bytes, final: bool = False) -> bool:
		"""Feed `data` (and end of input when `final`).

		Returns False once the scan can stop: a root was decoded and another
		top-level element follows it.
		"""
		while True:
			if not self._in_epilog:
				self._tail, self._tail_at = b"", self._fed
			self._tail += data
			self._fed += len(data)
			try:
				if data:
					self._parser.feed(data)
				if final:
					self._parser.close()
			except ParseError as e:
				self._drain()
				if e.code != _JUNK_AFTER_ROOT:
					raise
				if self.result is not None:
					return False
				index = self._parser.parser.ErrorByteIndex
				if index < self._tail_at:
					raise
				data = self._tail[index - self._tail_at:]
				logger.debug("Resuming scan at the next top-level element (byte %d)", index)
				self._restart()
				continue
			self._drain()
			return True


def parse(stream: BinaryIO, chunk_size: int = 16 * 1024) -> ParsedDocument:
	"""Parse a sitemap document from a binary stream in a single pass.

	The first top-level <urlset> yields a LeafSet, the first <sitemapindex>
	an IndexSet. Other top-level elements are skipped. Each decoded child is
	released as soon as it closes, so only one <url> or <sitemap> subtree is
	held in memory at a time.

	Raises MalformedDocumentError for broken XML or invalid children and
	UnrecognizedDocumentError when no known root was found.
	"""
	scanner = _RootScanner()
	try:
		while True:
			data = stream.read(chunk_size)
			if not data:
				scanner.push(b"", final=True)
				break
			if not scanner.push(data):
				break
	except ParseError as e:
		if not scanner.seen_root and e.code == _NO_ELEMENTS:
			raise UnrecognizedDocumentError("no <urlset> or <sitemapindex> root element found") from e
		raise MalformedDocumentError(f"invalid XML: {e}") from e
	except DefusedXmlException as e:
		raise MalformedDocumentError(f"forbidden XML construct: {e}") from e

	if scanner.result is None:
		raise UnrecognizedDocumentError("no <urlset> or <sitemapindex> root element found")
	return scanner.result


def parse_chunks(chunks: Iterable[bytes], cancelled: Optional[threading.Event] = None) -> ParsedDocument:
	"""Parse from an iterable of byte chunks, e.g. an HTTP body iterator."""
	return parse(ChunkReader(chunks, cancelled=cancelled))


def parse_bytes(data: Union[bytes, str]) -> ParsedDocument:
	if isinstance(data, str):
		data = data.encode("utf-8")
	return parse(io.BytesIO(data))


__all__ = ["parse", "parse_chunks", "parse_bytes", "local_name"]
