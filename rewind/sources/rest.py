"""PostgREST (Supabase REST) data source."""

from typing import Any, Dict, List, Optional, Tuple

import httpx

from rewind.core.errors import DataSourceError
from rewind.core.logging import get_logger
from rewind.core.time import Window
from rewind.sources.base import TIMESTAMPED_RESOURCES, DataSource, Resource

logger = get_logger(__name__)

# Nested relations embedded in the caption scan
CAPTION_SELECT = "*,images(url),profiles(name,email)"


class RestDataSource(DataSource):
    """
    Table scans against a PostgREST endpoint.

    No retries: a failed scan surfaces as DataSourceError and the pipeline
    degrades that resource to an empty set.
    """

    def __init__(self, base_url: str, api_key: Optional[str] = None,
                 timeout: float = 10.0, pushdown: bool = False,
                 time_column: str = "created_datetime_utc",
                 client: Optional[httpx.AsyncClient] = None):
        self.pushdown = pushdown
        self.time_column = time_column

        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"

        self.client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers=headers,
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
        )

    def build_params(self, resource: Resource, limit: int,
                     window: Optional[Window] = None) -> List[Tuple[str, str]]:
        """Query parameters for one scan; repeated keys are allowed."""
        select = CAPTION_SELECT if resource is Resource.CAPTIONS else "*"
        params = [("select", select), ("limit", str(limit))]

        if self.pushdown and window is not None and resource in TIMESTAMPED_RESOURCES:
            params.extend([
                (self.time_column, f"gte.{window.start_iso}"),
                (self.time_column, f"lte.{window.end_iso}"),
                ("order", f"{self.time_column}.desc"),
            ])

        return params

    async def fetch(
        self,
        resource: Resource,
        limit: int,
        window: Optional[Window] = None,
    ) -> List[Dict[str, Any]]:
        params = self.build_params(resource, limit, window)

        try:
            response = await self.client.get(f"/{resource.value}", params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise DataSourceError(resource.value, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise DataSourceError(resource.value, str(e)) from e

        if not isinstance(payload, list):
            raise DataSourceError(resource.value, f"expected a list of rows, got {type(payload).__name__}")

        logger.debug(f"Fetched {len(payload)} rows from {resource.value}")
        return payload

    async def aclose(self) -> None:
        await self.client.aclose()
