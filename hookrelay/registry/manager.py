from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from hookrelay.db.repositories import EndpointRepository
from hookrelay.errors import DuplicateEndpointError, UnknownEndpointError
from hookrelay.registry.validator import validate_url

logger = logging.getLogger(__name__)


class RegistryManager:
    """Register, deregister and list subscriber endpoints.

    Uniqueness is checked before the insert and backed by the unique
    constraint on ``endpoints.url``; a concurrent insert that slips past the
    check surfaces as ``DuplicateEndpointError`` instead of a second row.
    """

    def __init__(self, repository: EndpointRepository, *, require_tld: bool = True) -> None:
        self.repository = repository
        self.require_tld = require_tld

    def register(self, raw_url: str | None) -> str:
        url = validate_url(raw_url, require_tld=self.require_tld)
        logger.info("Registering webhook url: %s", url)

        if self.repository.find_by_url(url):
            logger.info("Rejected duplicate webhook url: %s", url)
            raise DuplicateEndpointError(f"{url} already exists")

        try:
            endpoint = self.repository.create(url)
        except IntegrityError as exc:
            self.repository.rollback()
            logger.info("Rejected duplicate webhook url after concurrent insert: %s", url)
            raise DuplicateEndpointError(f"{url} already exists") from exc

        return endpoint.id

    def deregister(self, raw_url: str | None) -> None:
        url = validate_url(raw_url, require_tld=self.require_tld)
        logger.info("Destroying webhook url: %s", url)

        matches = self.repository.find_by_url(url)
        if not matches:
            logger.info("Rejected unknown webhook url: %s", url)
            raise UnknownEndpointError(f"{url} does not exist")

        self.repository.delete_many(matches)

    def list(self) -> list[str]:
        return [endpoint.url for endpoint in self.repository.list()]
