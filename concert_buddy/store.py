"""
Document Store
==============
Collection-style access (list / get / create / upsert / delete) over the
SQLAlchemy tables. Every database failure surfaces as StoreError so callers
can abort the current action without knowing about the driver.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import databases
import sqlalchemy

from concert_buddy.database import (
    database, users, venues, rooms, user_locations, merch_booths, line_reports,
)

logger = logging.getLogger(__name__)

COLLECTIONS = {
    "users": users,
    "venues": venues,
    "rooms": rooms,
    "user_locations": user_locations,
    "merch_booths": merch_booths,
    "line_reports": line_reports,
}


class StoreError(Exception):
    """A read or write against the store failed."""


OrderBy = Tuple[str, str]


class Store:
    """Thin collection API over a `databases.Database`."""

    def __init__(self, db: Optional[databases.Database] = None):
        self.db = db if db is not None else database

    @staticmethod
    def _table(collection: str) -> sqlalchemy.Table:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise KeyError(f"Unknown collection '{collection}'. Available: {list(COLLECTIONS)}")

    async def list(
        self,
        collection: str,
        where: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[OrderBy]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return records matching every `where` equality, in `order_by` order."""
        table = self._table(collection)
        query = sqlalchemy.select(table)
        for column, value in (where or {}).items():
            query = query.where(table.c[column] == value)
        for column, direction in order_by or ():
            col = table.c[column]
            query = query.order_by(col.desc() if direction == "desc" else col.asc())
        if limit is not None:
            query = query.limit(limit)

        try:
            rows = await self.db.fetch_all(query)
        except Exception as e:
            logger.error("list %s failed: %s", collection, e)
            raise StoreError(f"Failed to list {collection}") from e
        return [dict(r._mapping) for r in rows]

    async def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        table = self._table(collection)
        try:
            row = await self.db.fetch_one(sqlalchemy.select(table).where(table.c.id == record_id))
        except Exception as e:
            logger.error("get %s/%s failed: %s", collection, record_id, e)
            raise StoreError(f"Failed to read {collection}") from e
        return dict(row._mapping) if row else None

    async def create(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new record. Fails if the id already exists."""
        table = self._table(collection)
        try:
            await self.db.execute(table.insert().values(**record))
        except Exception as e:
            logger.error("create %s failed: %s", collection, e)
            raise StoreError(f"Failed to create {collection} record") from e
        return record

    async def upsert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert, or overwrite the existing record with the same id."""
        table = self._table(collection)
        record_id = record["id"]
        values = {k: v for k, v in record.items() if k != "id"}
        try:
            async with self.db.transaction():
                existing = await self.db.fetch_val(
                    sqlalchemy.select(table.c.id).where(table.c.id == record_id)
                )
                if existing is None:
                    await self.db.execute(table.insert().values(**record))
                else:
                    await self.db.execute(
                        table.update().where(table.c.id == record_id).values(**values)
                    )
        except Exception as e:
            logger.error("upsert %s/%s failed: %s", collection, record_id, e)
            raise StoreError(f"Failed to save {collection} record") from e
        return record

    async def delete(self, collection: str, record_id: str) -> None:
        table = self._table(collection)
        try:
            await self.db.execute(table.delete().where(table.c.id == record_id))
        except Exception as e:
            logger.error("delete %s/%s failed: %s", collection, record_id, e)
            raise StoreError(f"Failed to delete {collection} record") from e


store = Store()
