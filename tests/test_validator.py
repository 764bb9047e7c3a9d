import pytest

from hookrelay.errors import InvalidUrlError
from hookrelay.registry.validator import validate_url


@pytest.mark.parametrize(
    "candidate",
    [
        None,
        "",
        "not a url",
        "a.example.com",
        "/relative/path",
        "ftp://a.example.com",
        "https://",
        "https://exa mple.com",
        " https://a.example.com",
        "https://a.example.com:99999",
        "http:/a.example.com",
        "https:\\\\a.example.com",
        "https:a.example.com",
        "https:///a.example.com",
        "https://a.exa\tmple.com",
        "https://a.example.com/some path",
        "https://a.example.com/\x00",
        "https://a.example.com\\hooks",
    ],
)
def test_rejects_missing_schemeless_or_malformed_urls(candidate):
    with pytest.raises(InvalidUrlError):
        validate_url(candidate)


def test_missing_url_message_names_the_query_parameter():
    with pytest.raises(InvalidUrlError, match="Requires 'url' query parameter"):
        validate_url(None)


def test_strips_one_trailing_slash():
    assert validate_url("https://a.example.com/") == "https://a.example.com"
    assert validate_url("https://a.example.com/base//") == "https://a.example.com/base/"


def test_leaves_url_without_trailing_slash_untouched():
    assert validate_url("https://su-123.stageup.uk/api") == "https://su-123.stageup.uk/api"


def test_requires_top_level_domain_by_default():
    with pytest.raises(InvalidUrlError):
        validate_url("http://localhost:3000")
    with pytest.raises(InvalidUrlError):
        validate_url("http://intranet/hooks")


def test_ip_literals_satisfy_top_level_domain_requirement():
    assert validate_url("http://127.0.0.1:8000/") == "http://127.0.0.1:8000"
    assert validate_url("http://[::1]:8000") == "http://[::1]:8000"


def test_local_addresses_allowed_when_tld_not_required():
    assert validate_url("http://localhost:3000/", require_tld=False) == "http://localhost:3000"
