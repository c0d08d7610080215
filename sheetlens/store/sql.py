"""
SQL metadata store backend
A single key/value table behind the async SQLAlchemy engine
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import Column, JSON, MetaData, String, Table, delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from sheetlens.core.exceptions import MetadataStoreException
from sheetlens.store.base import MetadataStore, Record, key_order

logger = logging.getLogger(__name__)

metadata = MetaData()


def kv_table(name: str = "kv_store", meta: MetaData = metadata) -> Table:
    if name in meta.tables:
        return meta.tables[name]
    return Table(
        name,
        meta,
        Column("key", String(512), primary_key=True),
        Column("value", JSON().with_variant(postgresql.JSONB(), "postgresql"), nullable=False),
    )


def create_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    options = {"echo": echo, "future": True, "pool_pre_ping": True}
    if database_url.startswith("postgresql"):
        options.update(pool_size=10, max_overflow=20)
    return create_async_engine(database_url, **options)


class SQLMetadataStore(MetadataStore):
    """Key/value records in one table; ordering and prefix matching are finalised in Python."""

    def __init__(
            self,
            database_url: Optional[str] = None,
            *,
            engine: Optional[AsyncEngine] = None,
            table_name: str = "kv_store",
            echo: bool = False
    ):
        if engine is None and not database_url:
            raise ValueError("SQLMetadataStore needs a database_url or an engine")
        self.engine = engine or create_engine(database_url, echo=echo)
        self.table = kv_table(table_name)
        self._owns_engine = engine is None

    async def init(self) -> None:
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(self.table.metadata.create_all, tables=[self.table])
        except (SQLAlchemyError, OSError) as e:
            raise MetadataStoreException(f"Failed to initialise {self.table.name}: {e}") from e
        logger.info(f"✅ Metadata table ready: {self.table.name}")

    async def close(self) -> None:
        if self._owns_engine:
            await self.engine.dispose()

    def _upsert(self, key: str, value: Record):
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            stmt = postgresql.insert(self.table).values(key=key, value=value)
        elif dialect == "sqlite":
            stmt = sqlite.insert(self.table).values(key=key, value=value)
        else:
            return None
        return stmt.on_conflict_do_update(
            index_elements=[self.table.c.key],
            set_={"value": stmt.excluded.value}
        )

    async def put(self, key: str, value: Record) -> None:
        try:
            async with self.engine.begin() as conn:
                stmt = self._upsert(key, value)
                if stmt is not None:
                    await conn.execute(stmt)
                    return
                result = await conn.execute(
                    update(self.table).where(self.table.c.key == key).values(value=value)
                )
                if result.rowcount == 0:
                    await conn.execute(self.table.insert().values(key=key, value=value))
        except (SQLAlchemyError, OSError) as e:
            raise MetadataStoreException(f"put failed for {key}: {e}") from e

    async def put_if_absent(self, key: str, value: Record) -> bool:
        dialect = self.engine.dialect.name
        try:
            async with self.engine.begin() as conn:
                if dialect in ("postgresql", "sqlite"):
                    insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
                    result = await conn.execute(
                        insert(self.table).values(key=key, value=value).on_conflict_do_nothing(
                            index_elements=[self.table.c.key]
                        )
                    )
                    return result.rowcount > 0
                await conn.execute(self.table.insert().values(key=key, value=value))
                return True
        except IntegrityError:
            return False
        except (SQLAlchemyError, OSError) as e:
            raise MetadataStoreException(f"put_if_absent failed for {key}: {e}") from e

    async def get(self, key: str) -> Optional[Record]:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(
                    select(self.table.c.value).where(self.table.c.key == key)
                )
                return result.scalar_one_or_none()
        except (SQLAlchemyError, OSError) as e:
            raise MetadataStoreException(f"get failed for {key}: {e}") from e

    async def delete(self, key: str) -> bool:
        try:
            async with self.engine.begin() as conn:
                result = await conn.execute(delete(self.table).where(self.table.c.key == key))
                return result.rowcount > 0
        except (SQLAlchemyError, OSError) as e:
            raise MetadataStoreException(f"delete failed for {key}: {e}") from e

    async def scan_prefix_items(self, prefix: str) -> List[Tuple[str, Record]]:
        try:
            async with self.engine.connect() as conn:
                result = await conn.execute(
                    select(self.table.c.key, self.table.c.value).where(
                        self.table.c.key.startswith(prefix, autoescape=True)
                    )
                )
                rows = result.all()
        except (SQLAlchemyError, OSError) as e:
            raise MetadataStoreException(f"scan failed for {prefix}: {e}") from e

        # LIKE is case-insensitive on some backends and collation decides ORDER BY
        items = [(key, value) for key, value in rows if key.startswith(prefix)]
        items.sort(key=lambda item: key_order(item[0]))
        return items
