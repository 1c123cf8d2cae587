# SitemapLens — Error hierarchy for fetching and parsing sitemaps
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import Optional, Tuple


class SitemapError(Exception):
	"""Base class for every failure raised by sitemaplens.

	`location` is the sitemap URL the failure belongs to, when known. The
	orchestrator fills it in for errors raised by the parser.
	"""

	def __init__(self, message: str, location: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		self.location = location

	def __str__(self) -> str:
		if self.location:
			return f"{self.message} ({self.location})"
		return self.message


class TransportError(SitemapError):
	"""Request construction or network failure."""


class HTTPStatusError(SitemapError):
	def __init__(self, location: str, status_code: int, body: str = "") -> None:
		message = f"expected 2xx, got {status_code}"
		if body:
			message = f"{message}: {body}"
		super().__init__(message, location)
		self.status_code = status_code
		self.body = body


class MalformedDocumentError(SitemapError):
	"""XML is not well formed, or a recognized root has invalid children."""


class UnrecognizedDocumentError(SitemapError):
	"""Stream ended without a <urlset> or <sitemapindex> root."""


class UnexpectedDocumentTypeError(SitemapError):
	def __init__(self, expected: str, actual: str, location: Optional[str] = None) -> None:
		super().__init__(f"expected <{expected}>, got <{actual}>", location)
		self.expected = expected
		self.actual = actual


class OriginMismatchError(SitemapError):
	def __init__(self, location: str, root_origin: Tuple[str, str], origin: Tuple[str, str]) -> None:
		super().__init__(
			"refusing to fetch child sitemap from a different origin: "
			f"{origin[0]}://{origin[1]} is not {root_origin[0]}://{root_origin[1]}",
			location,
		)
		self.root_origin = root_origin
		self.origin = origin


class URIParseError(SitemapError):
	"""A root or child location is not a well-formed URI."""


__all__ = [
	"SitemapError",
	"TransportError",
	"HTTPStatusError",
	"MalformedDocumentError",
	"UnrecognizedDocumentError",
	"UnexpectedDocumentTypeError",
	"OriginMismatchError",
	"URIParseError",
]
