"""
Cached access to content records.

Each operation owns one cache region so value shapes never mix:

| Operation | Region | Value |
|---|---|---|
| all_records | records | list[Record] |
| record_by_id | by-id | Record |
| records_by_owner | by-owner | list[Record] |
| generic resources | generic | raw JSON |
"""

from typing import Any, List, Mapping, Optional

import structlog

from content_gateway.cache.fetcher import CacheAsideFetcher
from content_gateway.cache.tier_selector import CacheTierSelector
from content_gateway.clients.content_client import ContentApiClient
from content_gateway.exceptions import NotFoundError
from content_gateway.models.records import Record

logger = structlog.get_logger(__name__)

REGION_RECORDS = "records"
REGION_BY_ID = "by-id"
REGION_BY_OWNER = "by-owner"
REGION_GENERIC = "generic"


class RecordService:
    """Cache-aside facade over ContentApiClient."""

    def __init__(
        self,
        client: ContentApiClient,
        selector: CacheTierSelector,
        single_flight: bool = False,
    ):
        self.client = client
        self.selector = selector
        self._all = CacheAsideFetcher(selector, REGION_RECORDS, List[Record], single_flight)
        self._by_id = CacheAsideFetcher(selector, REGION_BY_ID, Record, single_flight)
        self._by_owner = CacheAsideFetcher(selector, REGION_BY_OWNER, List[Record], single_flight)
        self._generic = CacheAsideFetcher(selector, REGION_GENERIC, Any, single_flight)

    async def get_all_records(self) -> List[Record]:
        return await self._all.fetch("all_records", [], self.client.get_all_records)

    async def get_record(self, record_id: int) -> Record:
        """
        Raises:
            NotFoundError: No record with this id (not cached)
        """
        return await self._by_id.fetch(
            "record_by_id", [record_id], lambda: self.client.get_record(record_id)
        )

    async def find_record(self, record_id: int) -> Optional[Record]:
        """Like get_record, but None instead of NotFoundError."""
        try:
            return await self.get_record(record_id)
        except NotFoundError:
            logger.info("Record not found", record_id=record_id)
            return None

    async def get_records_by_owner(self, owner_id: int) -> List[Record]:
        return await self._by_owner.fetch(
            "records_by_owner", [owner_id], lambda: self.client.get_records_by_owner(owner_id)
        )

    async def get_resource(
        self,
        path: str,
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Generic resource, keyed by path template, path values and query."""
        return await self._generic.fetch(
            "resource",
            [path, dict(path_params or {}), dict(query or {})],
            lambda: self.client.get_resource(path, path_params, query),
        )

    async def select_records(
        self,
        owner_id: Optional[int] = None,
        record_id: Optional[int] = None,
    ) -> List[Record]:
        """
        Records for a document export.

        A record filter wins over an owner filter; no filter means all records.
        A missing record yields an empty list.
        """
        if record_id is not None:
            record = await self.find_record(record_id)
            return [record] if record is not None else []
        if owner_id is not None:
            return await self.get_records_by_owner(owner_id)
        return await self.get_all_records()
