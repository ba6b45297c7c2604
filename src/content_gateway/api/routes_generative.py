"""
Generative-text API routes (/api/claude).

Thin handlers over GenerativeTextClient. Upstream failures propagate to the
exception handlers (503 after exhausted retries, 502 for other upstream
errors); blank inputs are rejected here with a 400 envelope.
"""

import time
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from content_gateway.api.dependencies import get_generative_client
from content_gateway.api.error_handlers import error_response
from content_gateway.api.models import (
    AnalyzeRequest,
    CompleteRequest,
    ConversationRequest,
    GenerateRequest,
)
from content_gateway.clients import prompts
from content_gateway.clients.generative_client import GenerativeTextClient
from content_gateway.models.envelope import ApiResponse
from content_gateway.models.generative import Message, MessagesRequest, MessagesResponse

logger = structlog.get_logger(__name__)

router = APIRouter()


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


@router.post(
    "/complete",
    response_model=ApiResponse[Dict[str, str]],
    summary="Single-prompt completion",
)
async def complete(
    body: CompleteRequest,
    client: GenerativeTextClient = Depends(get_generative_client),
):
    """
    Complete a prompt.

    Prompts without a system prompt are served cache-aside, so repeating the
    same prompt does not call the upstream again.
    """
    if _blank(body.prompt):
        return error_response(status.HTTP_400_BAD_REQUEST, "Prompt is required")

    if body.system:
        text = await client.complete(body.prompt, body.system)
    else:
        text = await client.complete_cached(body.prompt)
    return ApiResponse.success({"response": text or "", "prompt": body.prompt})


@router.post(
    "/chat",
    response_model=ApiResponse[MessagesResponse],
    summary="Full Messages API request",
)
async def chat(
    body: MessagesRequest,
    client: GenerativeTextClient = Depends(get_generative_client),
) -> ApiResponse[MessagesResponse]:
    return ApiResponse.success(await client.send_request(body))


@router.post(
    "/analyze",
    response_model=ApiResponse[Dict[str, str]],
    summary="Analyze text",
)
async def analyze_text(
    body: AnalyzeRequest,
    client: GenerativeTextClient = Depends(get_generative_client),
):
    if _blank(body.text):
        return error_response(status.HTTP_400_BAD_REQUEST, "Text is required")

    analysis = await client.analyze_text(body.text, body.type)
    return ApiResponse.success(
        {"analysis": analysis or "", "type": body.type, "originalText": body.text}
    )


@router.post(
    "/generate",
    response_model=ApiResponse[Dict[str, Any]],
    summary="Generate creative content",
)
async def generate_content(
    body: GenerateRequest,
    client: GenerativeTextClient = Depends(get_generative_client),
):
    if _blank(body.prompt):
        return error_response(status.HTTP_400_BAD_REQUEST, "Prompt is required")

    content = await client.generate_content(body.prompt, body.type, body.creativity)
    return ApiResponse.success(
        {
            "content": content or "",
            "type": body.type,
            "prompt": body.prompt,
            "creativity": body.creativity if body.creativity is not None else prompts.DEFAULT_CREATIVITY,
        }
    )


@router.post(
    "/conversation",
    response_model=ApiResponse[Dict[str, str]],
    summary="Multi-turn completion",
)
async def conversation(
    body: ConversationRequest,
    client: GenerativeTextClient = Depends(get_generative_client),
):
    if not body.messages:
        return error_response(status.HTTP_400_BAD_REQUEST, "Messages are required")
    if any(_blank(turn.role) or _blank(turn.content) for turn in body.messages):
        return error_response(status.HTTP_400_BAD_REQUEST, "Messages must have a role and content")

    messages = [Message(role=turn.role, content=turn.content) for turn in body.messages]
    text = await client.conversation(messages, body.system)
    return ApiResponse.success({"response": text or "", "messageCount": str(len(messages))})


@router.get("/health", summary="Generative API reachability")
async def health(
    client: GenerativeTextClient = Depends(get_generative_client),
) -> JSONResponse:
    healthy = await client.health_check()
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": "generative-api",
            "timestamp": int(time.time() * 1000),
        },
    )


@router.get("/analysis-types", summary="Supported analysis types")
async def analysis_types() -> Dict[str, Any]:
    return {
        "types": list(prompts.ANALYSIS_PROMPTS),
        "description": prompts.ANALYSIS_DESCRIPTIONS,
    }


@router.get("/content-types", summary="Supported content generation types")
async def content_types() -> Dict[str, Any]:
    return {
        "types": list(prompts.CONTENT_PROMPTS),
        "description": prompts.CONTENT_DESCRIPTIONS,
        "creativity": {
            "range": "0.0 to 1.0",
            "default": prompts.DEFAULT_CREATIVITY,
            "description": "Higher values = more creative output",
        },
    }
