"""Data source adapters.

- Resource names and the DataSource capability (base.py)
- Async SQL table scans (sql.py)
- PostgREST / Supabase REST scans (rest.py)
"""

from typing import Optional

from rewind.core.settings import Settings, get_settings

from .base import TIMESTAMPED_RESOURCES, DataSource, Resource


def create_data_source(settings: Optional[Settings] = None) -> DataSource:
    """Build the data source selected by ``settings.data_source``."""
    settings = settings or get_settings()
    kind = settings.data_source.lower()

    if kind == "sql":
        from rewind.core.db import get_engine
        from .sql import SqlDataSource
        return SqlDataSource(
            engine=get_engine(settings.db_url, settings.debug),
            pushdown=settings.pushdown_filters,
            time_column=settings.time_column,
        )

    if kind == "rest":
        from .rest import RestDataSource
        return RestDataSource(
            base_url=settings.rest_url,
            api_key=settings.rest_api_key,
            timeout=settings.rest_timeout,
            pushdown=settings.pushdown_filters,
            time_column=settings.time_column,
        )

    raise ValueError(f"Unknown data source {settings.data_source!r}; expected 'sql' or 'rest'")


__all__ = [
    'DataSource',
    'Resource',
    'TIMESTAMPED_RESOURCES',
    'create_data_source',
]
