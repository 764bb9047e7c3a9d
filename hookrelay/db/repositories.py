"""Registry store adapter.

The relay treats storage as a plain collection: insert, delete by id, and
lookup filtered by equality on ``url``.  Ids are generated on insert.
"""
from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from hookrelay.db.models import Endpoint


class EndpointRepository:
    def __init__(self, db: Session):
        self.db = db

    def create(self, url: str) -> Endpoint:
        entity = Endpoint(url=url)
        self.db.add(entity)
        self.db.flush()
        return entity

    def find_by_url(self, url: str) -> Sequence[Endpoint]:
        stmt = select(Endpoint).where(Endpoint.url == url)
        return self.db.execute(stmt).scalars().all()

    def list(self) -> Sequence[Endpoint]:
        return self.db.execute(select(Endpoint)).scalars().all()

    def delete_many(self, entities: Sequence[Endpoint]) -> None:
        for entity in entities:
            self.db.delete(entity)
        self.db.flush()

    def rollback(self) -> None:
        self.db.rollback()
