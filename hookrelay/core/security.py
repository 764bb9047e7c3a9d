from __future__ import annotations

import hmac
from dataclasses import dataclass

from hookrelay.errors import UnauthorizedError


@dataclass(slots=True)
class ApiKeyGuard:
    api_key: str | None = None

    def is_valid(self, candidate: str | None) -> bool:
        # An unconfigured key locks the management API rather than opening it
        if not self.api_key or candidate is None:
            return False
        return hmac.compare_digest(candidate.encode("utf-8"), self.api_key.encode("utf-8"))

    def check(self, candidate: str | None) -> None:
        if not self.is_valid(candidate):
            raise UnauthorizedError("api_key is not valid")
