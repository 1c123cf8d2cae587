import pytest

from sitemaplens.core.models import (
	ChangeFrequency,
	DocumentKind,
	IndexSet,
	LeafSet,
	ParsedDocument,
	SitemapRef,
	URLEntry,
)
from sitemaplens.errors import UnexpectedDocumentTypeError


def test_change_frequency_coerce():
	assert ChangeFrequency.coerce("weekly") is ChangeFrequency.WEEKLY
	assert ChangeFrequency.WEEKLY == "weekly"
	assert ChangeFrequency.coerce("biweekly") == "biweekly"


def test_effective_priority():
	assert URLEntry("https://a/").effective_priority == 0.5
	assert URLEntry("https://a/", priority=0.0).effective_priority == 0.0


def test_parsed_document_accessors():
	leaf = ParsedDocument(DocumentKind.LEAF, LeafSet((URLEntry("https://a/"),)))
	assert leaf.leaf[0].location == "https://a/"
	with pytest.raises(UnexpectedDocumentTypeError):
		leaf.index
	index = ParsedDocument(DocumentKind.INDEX, IndexSet((SitemapRef("https://a/s.xml"),)))
	assert [r.location for r in index.index] == ["https://a/s.xml"]
	with pytest.raises(UnexpectedDocumentTypeError):
		index.leaf


def test_parsed_document_rejects_mismatched_payload():
	with pytest.raises(TypeError):
		ParsedDocument(DocumentKind.LEAF, IndexSet())
