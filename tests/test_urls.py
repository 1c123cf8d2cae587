import pytest

from sitemaplens.errors import URIParseError
from sitemaplens.utils.urls import origin_of, parse_uri


def test_origin_of():
	assert origin_of("HTTPS://User:pw@Example.COM:8443/a?b") == ("https", "example.com:8443")
	assert origin_of("https://example.com/sitemap.xml") == ("https", "example.com")


def test_origin_comparison():
	assert origin_of("https://example.com/index.xml") == origin_of("https://example.com/a/b.xml")
	assert origin_of("https://example.com/") != origin_of("http://example.com/")
	assert origin_of("https://example.com/") != origin_of("https://www.example.com/")
	assert origin_of("https://example.com/") != origin_of("https://example.com:444/")


@pytest.mark.parametrize(
	"url",
	[
		"https://exa mple.com/",
		"https://example.com/\x00",
		"https://example.com/%zz",
		"http://[::1/sitemap.xml",
		"http://example.com:99999/",
		"http://example.com:port/",
	],
)
def test_parse_uri_rejects(url):
	with pytest.raises(URIParseError):
		parse_uri(url)


def test_parse_uri_error_names_location():
	with pytest.raises(URIParseError) as info:
		parse_uri("https://example.com/%zz")
	assert info.value.location == "https://example.com/%zz"
	assert "https://example.com/%zz" in str(info.value)
