"""Upstream webhook providers and the sub-path each one is relayed to."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ProviderName(str, Enum):
    MUX = "mux"
    STRIPE = "stripe"


@dataclass(frozen=True, slots=True)
class Provider:
    name: ProviderName
    path: str
    signature_header: str


PROVIDERS: dict[ProviderName, Provider] = {
    ProviderName.MUX: Provider(ProviderName.MUX, "/mux/hooks", "mux-signature"),
    ProviderName.STRIPE: Provider(ProviderName.STRIPE, "/stripe/hooks", "stripe-signature"),
}


def get_provider(name: ProviderName | str) -> Provider:
    return PROVIDERS[ProviderName(name)]
