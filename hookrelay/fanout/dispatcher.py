"""Concurrent fan-out of one inbound webhook to every registered endpoint.

Each outbound attempt runs as its own coroutine that holds the endpoint URL
for its whole lifetime, so the outcome of every attempt is recorded against
the endpoint that produced it, in both the success and the error branch.
Attempts are joined with ``asyncio.gather``: a broadcast returns only after
every attempt has settled, and a slow or failing endpoint never cancels its
siblings.

Delivery policy
---------------
- Any response from the subscriber counts as delivered, whatever its status,
  unless ``success_statuses`` narrows the accepted set.
- Transport errors, timeouts and any unexpected error raised while sending
  count as failed.
- There are no retries.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Literal

import httpx
from starlette.concurrency import run_in_threadpool

from hookrelay.errors import DeliveryError
from hookrelay.fanout.providers import Provider
from hookrelay.registry.manager import RegistryManager

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_S = 10.0

# Headers tied to the inbound connection; httpx recomputes what it needs
_HOP_BY_HOP_HEADERS = frozenset(
    {
        b"host",
        b"content-length",
        b"connection",
        b"keep-alive",
        b"transfer-encoding",
        b"te",
        b"trailer",
        b"upgrade",
        b"proxy-authorization",
        b"proxy-authenticate",
    }
)


def forwardable_headers(headers: Iterable[tuple[bytes, bytes]]) -> list[tuple[bytes, bytes]]:
    """Drop connection-level headers and keep everything else byte for byte.

    Raw header bytes are relayed as received so signature headers and any
    non-ASCII values reach subscribers unchanged.
    """
    return [(key, value) for key, value in headers if key.lower() not in _HOP_BY_HOP_HEADERS]


# ---------------------------------------------------------------------------
# Report types
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class DeliveryOutcome:
    """Result of one outbound attempt for one endpoint."""

    url: str
    target: str
    status: Literal["delivered", "failed"]
    status_code: int | None = None
    error: str | None = None


@dataclass(slots=True)
class FanoutReport:
    """Delivered/failed partition of the endpoints in one broadcast snapshot."""

    provider: str
    outcomes: list[DeliveryOutcome] = field(default_factory=list)

    @property
    def delivered(self) -> list[str]:
        return [o.url for o in self.outcomes if o.status == "delivered"]

    @property
    def failed(self) -> list[str]:
        return [o.url for o in self.outcomes if o.status == "failed"]

    def __len__(self) -> int:
        return len(self.outcomes)

    def summary(self) -> dict[str, object]:
        return {
            "provider": self.provider,
            "total": len(self.outcomes),
            "delivered": self.delivered,
            "failed": self.failed,
        }


# ---------------------------------------------------------------------------
# FanoutDispatcher
# ---------------------------------------------------------------------------


class FanoutDispatcher:
    """Broadcasts inbound provider events to registered endpoints.

    Parameters
    ----------
    client:
        Shared ``httpx.AsyncClient`` used for every outbound POST.
    timeout_s:
        Independent timeout applied to each outbound attempt.
    success_statuses:
        Subscriber status codes counted as delivered.  ``None`` (the
        default) accepts any response.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        success_statuses: Iterable[int] | None = None,
    ) -> None:
        self.client = client
        self.timeout_s = timeout_s
        self.success_statuses = frozenset(success_statuses) if success_statuses is not None else None

    # -- public API ---------------------------------------------------------

    async def broadcast(
        self,
        registry: RegistryManager,
        provider: Provider,
        headers: Sequence[tuple[bytes, bytes]],
        body: bytes,
    ) -> FanoutReport:
        """Snapshot the registry, then deliver to every endpoint in it."""
        urls = await run_in_threadpool(registry.list)
        return await self.deliver(urls, provider, headers, body)

    async def deliver(
        self,
        urls: Sequence[str],
        provider: Provider,
        headers: Sequence[tuple[bytes, bytes]],
        body: bytes,
    ) -> FanoutReport:
        """POST *body* to ``url + provider.path`` for every URL concurrently.

        Never raises for a failed delivery; failures are recorded on the
        returned report and logged.
        """
        report = FanoutReport(provider=provider.name.value)
        if not urls:
            logger.info("No endpoints registered; nothing to relay for %s", provider.name.value)
            return report

        outbound = self._outbound_headers(provider, headers)
        results = await asyncio.gather(
            *(self._attempt(url, provider, outbound, body) for url in urls),
            return_exceptions=True,
        )
        for url, result in zip(urls, results):
            if isinstance(result, BaseException):
                # Cancellation of one attempt still yields an outcome for its endpoint
                result = DeliveryOutcome(
                    url=url,
                    target=f"{url}{provider.path}",
                    status="failed",
                    error=f"{type(result).__name__}: {result}",
                )
            report.outcomes.append(result)

        logger.info(
            "Fan-out complete for %s: %d delivered, %d failed (delivered=%s failed=%s)",
            report.provider,
            len(report.delivered),
            len(report.failed),
            report.delivered,
            report.failed,
        )
        return report

    # -- internals ----------------------------------------------------------

    def _outbound_headers(
        self, provider: Provider, headers: Sequence[tuple[bytes, bytes]]
    ) -> list[tuple[bytes, bytes]]:
        forwarded = forwardable_headers(headers)
        signature = provider.signature_header.encode("latin-1")
        if not any(key.lower() == signature for key, _ in forwarded):
            logger.warning(
                "Inbound %s event has no %s header; relaying unsigned",
                provider.name.value,
                provider.signature_header,
            )
        return forwarded

    async def _attempt(
        self,
        url: str,
        provider: Provider,
        headers: list[tuple[bytes, bytes]],
        body: bytes,
    ) -> DeliveryOutcome:
        target = f"{url}{provider.path}"
        try:
            status_code = await self._send(target, headers, body)
        except DeliveryError as exc:
            logger.warning("Delivery to %s failed: %s", target, exc.reason)
            return DeliveryOutcome(url=url, target=target, status="failed", error=exc.reason)
        except Exception as exc:
            logger.exception("Unexpected error delivering to %s", target)
            return DeliveryOutcome(
                url=url,
                target=target,
                status="failed",
                error=f"{type(exc).__name__}: {exc}",
            )

        if self.success_statuses is not None and status_code not in self.success_statuses:
            logger.warning("Delivery to %s rejected with status %d", target, status_code)
            return DeliveryOutcome(
                url=url,
                target=target,
                status="failed",
                status_code=status_code,
                error=f"unaccepted status {status_code}",
            )

        return DeliveryOutcome(url=url, target=target, status="delivered", status_code=status_code)

    async def _send(self, target: str, headers: list[tuple[bytes, bytes]], body: bytes) -> int:
        try:
            response = await self.client.post(
                target,
                content=body,
                headers=headers,
                timeout=self.timeout_s,
            )
        except httpx.TimeoutException as exc:
            raise DeliveryError(target, f"timed out after {self.timeout_s}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise DeliveryError(target, f"{type(exc).__name__}: {exc}") from exc
        return response.status_code
