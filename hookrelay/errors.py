"""Relay error taxonomy.

Registry errors describe bad user input and surface verbatim as HTTP 400.
``UnauthorizedError`` surfaces as HTTP 401.  ``DeliveryError`` never leaves
the fan-out dispatcher; it is recorded on the delivery outcome and logged.
"""
from __future__ import annotations


class RelayError(Exception):
    """Base class for every error raised by the relay."""


class RegistryError(RelayError, ValueError):
    """Raised when a registry request cannot be honoured."""


class InvalidUrlError(RegistryError):
    """Raised when a candidate URL is missing or not a valid absolute URL."""


class DuplicateEndpointError(RegistryError):
    """Raised when the normalized URL is already registered."""


class UnknownEndpointError(RegistryError):
    """Raised when no endpoint matches a deregistration target."""


class UnauthorizedError(RelayError):
    """Raised when the management API key is missing or wrong."""


class DeliveryError(RelayError):
    """Raised inside the dispatcher when one outbound attempt fails."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"delivery to {url} failed: {reason}")
        self.url = url
        self.reason = reason
