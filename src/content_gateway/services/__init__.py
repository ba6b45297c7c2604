"""Application services composed from clients and caches."""

from content_gateway.services.record_service import RecordService

__all__ = ["RecordService"]
