"""URL validation and normalization for subscriber endpoints.

A valid endpoint URL is absolute: ``http`` or ``https`` scheme and a host.
When ``require_tld`` is set the host must be an IP literal or a dotted name
ending in a real-looking top-level domain, which rejects ``localhost`` and
bare intranet names.  Normalization strips exactly one trailing ``/`` since
the fan-out appends provider paths such as ``/mux/hooks`` directly.
"""
from __future__ import annotations

import ipaddress
import re

from pydantic import HttpUrl, TypeAdapter, ValidationError

from hookrelay.errors import InvalidUrlError

_URL_ADAPTER = TypeAdapter(HttpUrl)

_TLD_RE = re.compile(r"(?:[a-z]{2,63}|xn--[a-z0-9-]{1,59})")

# The parser silently repairs these, so they are rejected before parsing
_PREFIX_RE = re.compile(r"(?i)https?://[^/\\]")
_FORBIDDEN_RE = re.compile(r"[\x00-\x20\x7f\\]")


def _is_ip_literal(host: str) -> bool:
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        ipaddress.ip_address(host)
    except ValueError:
        return False
    return True


def _has_tld(host: str) -> bool:
    if _is_ip_literal(host):
        return True
    labels = host.rstrip(".").split(".")
    if len(labels) < 2 or not all(labels):
        return False
    return _TLD_RE.fullmatch(labels[-1]) is not None


def validate_url(candidate: str | None, *, require_tld: bool = True) -> str:
    """Return *candidate* without its trailing slash, or raise ``InvalidUrlError``."""
    if not candidate:
        raise InvalidUrlError("Requires 'url' query parameter to register endpoint")

    if not _PREFIX_RE.match(candidate) or _FORBIDDEN_RE.search(candidate):
        raise InvalidUrlError("URL provided is not a valid address")

    try:
        parsed = _URL_ADAPTER.validate_python(candidate)
    except ValidationError as exc:
        raise InvalidUrlError("URL provided is not a valid address") from exc

    host = parsed.host
    if not host:
        raise InvalidUrlError("URL provided is not a valid address")
    if require_tld and not _has_tld(host):
        raise InvalidUrlError("URL provided is not a valid address")

    if candidate.endswith("/"):
        return candidate[:-1]
    return candidate
