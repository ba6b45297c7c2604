"""
Records API routes (/api/posts).

All JSON responses use the ApiResponse envelope. Reads go through
RecordService, so every endpoint is served cache-aside from the active tier.
"""

from typing import Any, List, Optional
from urllib.parse import quote

import structlog
from fastapi import APIRouter, Depends, Query, Request, Response
from starlette.concurrency import run_in_threadpool

from content_gateway.api.dependencies import (
    get_document_renderer,
    get_format_converter,
    get_record_service,
)
from content_gateway.documents.converter import FormatConverter
from content_gateway.documents.formats import DocumentFormat
from content_gateway.documents.renderer import DocumentRenderer
from content_gateway.exceptions import NotFoundError
from content_gateway.models.envelope import ApiResponse
from content_gateway.models.records import Record
from content_gateway.services.record_service import RecordService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[List[Record]],
    summary="List all records",
)
async def get_all_records(
    service: RecordService = Depends(get_record_service),
) -> ApiResponse[List[Record]]:
    logger.info("Received request to get all records")
    return ApiResponse.success(await service.get_all_records())


@router.get(
    "/document",
    summary="Export records as a document",
    description="""
    Render records into a PDF, DOCX or RTF document.

    A record filter (postId) wins over an owner filter (userId); no filter
    exports every record. Unknown formats are rejected before any record is
    fetched.
    """,
    responses={
        200: {
            "description": "Generated document",
            "content": {
                "application/pdf": {},
                "application/vnd.openxmlformats-officedocument.wordprocessingml.document": {},
                "application/rtf": {},
            },
        },
        400: {"description": "Unsupported format"},
        404: {"description": "No records matched the filters"},
    },
)
async def generate_document(
    format: str = Query(default="pdf", description="pdf, docx or rtf"),
    user_id: Optional[int] = Query(default=None, alias="userId"),
    post_id: Optional[int] = Query(default=None, alias="postId"),
    service: RecordService = Depends(get_record_service),
    renderer: DocumentRenderer = Depends(get_document_renderer),
    converter: FormatConverter = Depends(get_format_converter),
) -> Response:
    """
    Generate a document containing records.

    Raises:
        UnsupportedFormat: Unknown format (400)
        NotFoundError: No records to export (404)
        RenderError: Conversion failed (500)
    """
    document_format = DocumentFormat.parse(format)
    logger.info(
        "Received request to generate document",
        format=document_format.value,
        user_id=user_id,
        post_id=post_id,
    )

    records = await service.select_records(owner_id=user_id, record_id=post_id)
    if not records:
        raise NotFoundError(
            "No posts found for the given criteria",
            details={"user_id": user_id, "post_id": post_id},
        )

    markup = renderer.render(records)
    # Converters are CPU-bound and synchronous
    payload = await run_in_threadpool(converter.convert_markup, markup, document_format)

    return Response(
        content=payload,
        media_type=document_format.media_type,
        headers={
            "Content-Disposition": f"attachment; filename=posts.{document_format.extension}",
        },
    )


@router.get(
    "/user/{user_id}",
    response_model=ApiResponse[List[Record]],
    summary="List records of one owner",
)
async def get_records_by_owner(
    user_id: int,
    service: RecordService = Depends(get_record_service),
) -> ApiResponse[List[Record]]:
    logger.info("Received request to get records for owner", owner_id=user_id)
    return ApiResponse.success(await service.get_records_by_owner(user_id))


@router.get(
    "/generic/{path}",
    response_model=ApiResponse[Any],
    summary="Fetch any content API resource",
)
async def get_generic_resource(
    path: str,
    service: RecordService = Depends(get_record_service),
) -> ApiResponse[Any]:
    logger.info("Received request for generic resource", path=path)
    return ApiResponse.success(await service.get_resource(path))


@router.get(
    "/generic/{path}/query",
    response_model=ApiResponse[Any],
    summary="Fetch any content API resource with query parameters",
)
async def get_generic_resource_with_query(
    path: str,
    request: Request,
    service: RecordService = Depends(get_record_service),
) -> ApiResponse[Any]:
    query = dict(request.query_params)
    logger.info("Received request for generic resource", path=path, query=query)
    return ApiResponse.success(await service.get_resource(path, query=query))


@router.get(
    "/generic/{path}/{resource_id}",
    response_model=ApiResponse[Any],
    summary="Fetch one content API resource by id",
)
async def get_generic_resource_by_id(
    path: str,
    resource_id: str,
    service: RecordService = Depends(get_record_service),
) -> ApiResponse[Any]:
    logger.info("Received request for generic resource", path=path, resource_id=resource_id)
    return ApiResponse.success(
        await service.get_resource(
            f"{quote(path, safe='')}/{{id}}", path_params={"id": resource_id}
        )
    )


@router.get(
    "/{record_id}",
    response_model=ApiResponse[Record],
    summary="Get one record",
    responses={404: {"description": "Record not found"}},
)
async def get_record(
    record_id: int,
    service: RecordService = Depends(get_record_service),
) -> ApiResponse[Record]:
    logger.info("Received request to get record", record_id=record_id)
    record = await service.find_record(record_id)
    if record is None:
        raise NotFoundError(f"Post not found with ID: {record_id}", details={"record_id": record_id})
    return ApiResponse.success(record)
