"""
FastAPI API routes and endpoints.

- routes_records.py: records and document export (/api/posts)
- routes_generative.py: generative-text endpoints (/api/claude)
- routes_service.py: index, health, cache re-probe
- dependencies.py: access to the resources built in the app lifespan
- models.py: API-specific request/response models
- error_handlers.py: exception handlers producing error envelopes
"""

from content_gateway.api import dependencies, error_handlers, models
from content_gateway.api.routes_generative import router as generative_router
from content_gateway.api.routes_records import router as records_router
from content_gateway.api.routes_service import router as service_router

__all__ = [
    "records_router",
    "generative_router",
    "service_router",
    "dependencies",
    "error_handlers",
    "models",
]
