"""
Client for the content API (JSONPlaceholder-style REST resources).

Endpoints:
- GET /posts: all records
- GET /posts/{id}: one record
- GET /posts?userId={id}: records of one owner
- GET /{path}: any other resource, with optional path and query parameters
"""

from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote

import structlog

from content_gateway.clients.base_client import BaseUpstreamClient
from content_gateway.config import Settings
from content_gateway.exceptions import NotFoundError
from content_gateway.models.records import Record
from content_gateway.resilience.client import RequestDescriptor
from content_gateway.resilience.exceptions import UpstreamError
from content_gateway.resilience.policy import RetryPolicy

logger = structlog.get_logger(__name__)

HTTP_NOT_FOUND = 404


class ContentApiClient(BaseUpstreamClient):
    """Typed access to the content API through the resilient call path."""

    upstream_name = "content_api"

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "ContentApiClient":
        return cls(
            base_url=settings.CONTENT_API_BASE_URL,
            timeout=settings.CONTENT_API_TIMEOUT,
            retry_policy=RetryPolicy.from_settings(settings),
            **kwargs,
        )

    async def get_all_records(self) -> List[Record]:
        logger.info("Fetching all records from content API")
        data = await self._get("/posts")
        return [Record.model_validate(item) for item in data]

    async def get_record(self, record_id: int) -> Record:
        """
        Fetch one record.

        Raises:
            NotFoundError: No record with this id
        """
        logger.info("Fetching record", record_id=record_id)
        data = await self._get(f"/posts/{record_id}")
        if not data:
            raise NotFoundError(f"Record not found with ID: {record_id}", details={"record_id": record_id})
        return Record.model_validate(data)

    async def get_records_by_owner(self, owner_id: int) -> List[Record]:
        logger.info("Fetching records for owner", owner_id=owner_id)
        data = await self._get("/posts", params={"userId": owner_id})
        return [Record.model_validate(item) for item in data]

    async def get_resource(
        self,
        path: str,
        path_params: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Fetch any resource as raw JSON.

        Args:
            path: Resource path template; only ``{name}`` tokens named in
                ``path_params`` are replaced, any other brace is sent as is
            path_params: Values substituted (URL-quoted) into the placeholders
            query: Query string parameters

        Returns:
            Decoded JSON (dict or list)
        """
        resolved = "/" + path.lstrip("/")
        for name, value in (path_params or {}).items():
            resolved = resolved.replace("{" + name + "}", quote(str(value), safe=""))
        logger.info("Fetching resource", path=resolved, query=dict(query) if query else None)
        return await self._get(resolved, params=dict(query) if query else None)

    async def health_check(self) -> bool:
        try:
            response = await self._http.get("/posts/1", timeout=5.0)
            return response.status_code == 200
        except Exception as e:
            logger.warning("Content API health check failed", error=str(e))
            return False

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return await self._execute(RequestDescriptor("GET", path, params=params))
        except UpstreamError as e:
            if e.status_code == HTTP_NOT_FOUND:
                raise NotFoundError(f"Resource not found: {path}", details={"path": path}) from e
            raise
