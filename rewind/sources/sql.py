"""Async SQL data source."""

from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from rewind.core.db import get_engine, get_sessionmaker
from rewind.core.errors import DataSourceError
from rewind.core.logging import get_logger
from rewind.core.repositories import scan_table
from rewind.core.time import Window
from rewind.sources.base import TIMESTAMPED_RESOURCES, DataSource, Resource

logger = get_logger(__name__)


class SqlDataSource(DataSource):
    """Table scans over an async SQLAlchemy engine, one session per fetch."""

    def __init__(self, engine: Optional[AsyncEngine] = None,
                 pushdown: bool = False,
                 time_column: str = "created_datetime_utc"):
        self.engine = engine or get_engine()
        self.session_factory = get_sessionmaker(self.engine)
        self.pushdown = pushdown
        self.time_column = time_column

    async def fetch(
        self,
        resource: Resource,
        limit: int,
        window: Optional[Window] = None,
    ) -> List[Dict[str, Any]]:
        use_pushdown = self.pushdown and window is not None and resource in TIMESTAMPED_RESOURCES

        try:
            async with self.session_factory() as session:
                return await scan_table(
                    session,
                    resource.value,
                    limit,
                    time_column=self.time_column if use_pushdown else None,
                    window=window if use_pushdown else None,
                )
        except SQLAlchemyError as e:
            raise DataSourceError(resource.value, str(e)) from e

    async def aclose(self) -> None:
        await self.engine.dispose()
