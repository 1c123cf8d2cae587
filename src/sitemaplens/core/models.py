# SitemapLens — Sitemap data model (entries, refs, leaf and index documents)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Dict, Iterator, Optional, Tuple, Union

from .w3cdate import W3CDateTime
from ..errors import UnexpectedDocumentTypeError


# Conventional protocol limit; not enforced.
MAX_ENTRIES = 50000
DEFAULT_PRIORITY = 0.5


class ChangeFrequency(str, Enum):
	"""Advisory hint for how often a page changes.

	Crawlers treat it as a suggestion. Values outside these seven tokens are
	kept as plain strings.
	"""

	ALWAYS = "always"
	HOURLY = "hourly"
	DAILY = "daily"
	WEEKLY = "weekly"
	MONTHLY = "monthly"
	YEARLY = "yearly"
	NEVER = "never"

	@classmethod
	def coerce(cls, value: str) -> Union["ChangeFrequency", str]:
		try:
			return cls(value)
		except ValueError:
			return value


class DocumentKind(str, Enum):
	LEAF = "urlset"
	INDEX = "sitemapindex"


@dataclass(frozen=True)
class URLEntry:
	"""A crawlable document listed in a <urlset>."""

	location: str
	last_modified: Optional[W3CDateTime] = None
	change_frequency: Optional[Union[ChangeFrequency, str]] = None
	priority: Optional[float] = None
	alternates: Dict[str, str] = field(default_factory=dict)

	@property
	def effective_priority(self) -> float:
		return DEFAULT_PRIORITY if self.priority is None else self.priority


@dataclass(frozen=True)
class SitemapRef:
	"""Pointer to a child sitemap listed in a <sitemapindex>."""

	location: str
	last_modified: Optional[W3CDateTime] = None


@dataclass(frozen=True)
class LeafSet:
	entries: Tuple[URLEntry, ...] = ()

	def __len__(self) -> int:
		return len(self.entries)

	def __iter__(self) -> Iterator[URLEntry]:
		return iter(self.entries)

	def __getitem__(self, i):
		return self.entries[i]

	@classmethod
	def read_from(cls, stream: BinaryIO) -> "LeafSet":
		"""Decode a stream that must hold a <urlset> document."""
		from .parse import parse

		return parse(stream).leaf


@dataclass(frozen=True)
class IndexSet:
	refs: Tuple[SitemapRef, ...] = ()

	def __len__(self) -> int:
		return len(self.refs)

	def __iter__(self) -> Iterator[SitemapRef]:
		return iter(self.refs)

	def __getitem__(self, i):
		return self.refs[i]

	@classmethod
	def read_from(cls, stream: BinaryIO) -> "IndexSet":
		"""Decode a stream that must hold a <sitemapindex> document."""
		from .parse import parse

		return parse(stream).index


@dataclass(frozen=True)
class ParsedDocument:
	"""Result of one parse: exactly one of a LeafSet or an IndexSet."""

	kind: DocumentKind
	document: Union[LeafSet, IndexSet]

	def __post_init__(self) -> None:
		expected = LeafSet if self.kind == DocumentKind.LEAF else IndexSet
		if not isinstance(self.document, expected):
			raise TypeError(f"{self.kind.value} document must be a {expected.__name__}")

	@property
	def is_leaf(self) -> bool:
		return self.kind == DocumentKind.LEAF

	@property
	def is_index(self) -> bool:
		return self.kind == DocumentKind.INDEX

	@property
	def leaf(self) -> LeafSet:
		if not self.is_leaf:
			raise UnexpectedDocumentTypeError(DocumentKind.LEAF.value, self.kind.value)
		return self.document

	@property
	def index(self) -> IndexSet:
		if not self.is_index:
			raise UnexpectedDocumentTypeError(DocumentKind.INDEX.value, self.kind.value)
		return self.document


__all__ = [
	"MAX_ENTRIES",
	"DEFAULT_PRIORITY",
	"ChangeFrequency",
	"DocumentKind",
	"URLEntry",
	"SitemapRef",
	"LeafSet",
	"IndexSet",
	"ParsedDocument",
]
