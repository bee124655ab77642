"""Repository layer for read-only table scans.

Rows come back as plain dictionaries so the normalizer can deal with
whatever columns a given deployment actually has.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import column, desc, literal_column, select, table
from sqlalchemy.ext.asyncio import AsyncSession

from rewind.core.logging import get_logger
from rewind.core.time import Window

logger = get_logger(__name__)


def build_scan_query(
    table_name: str,
    limit: int,
    time_column: Optional[str] = None,
    window: Optional[Window] = None,
):
    """
    Build ``SELECT * FROM <table> [WHERE <time_column> BETWEEN ...] LIMIT n``.

    When a time column and window are given the rows are also ordered most
    recent first.
    """
    stmt = select(literal_column("*")).select_from(table(table_name))

    if time_column and window is not None:
        ts = column(time_column)
        stmt = stmt.where(ts.between(window.start, window.end)).order_by(desc(ts))

    return stmt.limit(limit)


async def scan_table(
    session: AsyncSession,
    table_name: str,
    limit: int,
    time_column: Optional[str] = None,
    window: Optional[Window] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch up to ``limit`` rows from a table.

    Args:
        session: Database session
        table_name: Table to scan
        limit: Maximum number of rows
        time_column: Optional column used for window pushdown
        window: Optional window to push down

    Returns:
        List of row dictionaries
    """
    stmt = build_scan_query(table_name, limit, time_column=time_column, window=window)
    result = await session.execute(stmt)
    rows = [dict(row) for row in result.mappings().all()]

    logger.debug(f"Scanned {len(rows)} rows from {table_name} (limit={limit})")
    return rows
