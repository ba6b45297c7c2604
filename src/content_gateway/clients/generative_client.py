"""
Client for the generative-text Messages API.

API Endpoints:
- POST /v1/messages: generate a completion for a message list

Every call goes through ResilientClient: 120s default timeout, retries on
5xx / 429 / timeouts with exponential backoff.
"""

from typing import List, Optional

import structlog

from content_gateway.cache.fetcher import CacheAsideFetcher
from content_gateway.clients import prompts
from content_gateway.clients.base_client import BaseUpstreamClient
from content_gateway.config import Settings
from content_gateway.models.generative import Message, MessagesRequest, MessagesResponse
from content_gateway.resilience.client import RequestDescriptor
from content_gateway.resilience.policy import RetryPolicy

logger = structlog.get_logger(__name__)


class GenerativeTextClient(BaseUpstreamClient):
    """
    Generative-text client with convenience operations.

    Attributes:
        default_model: Model used when the caller does not pick one
        default_max_tokens: Token budget for plain completions
        default_temperature: Sampling temperature for plain completions
        completions_cache: Optional cache-aside fetcher for ``complete_cached``
    """

    upstream_name = "generative_api"

    def __init__(
        self,
        base_url: str = "https://api.anthropic.com",
        api_key: str = "",
        api_version: str = "2023-06-01",
        default_model: str = "claude-3-5-sonnet-20241022",
        default_max_tokens: int = 1000,
        default_temperature: float = 0.7,
        timeout: float = 120.0,
        completions_cache: Optional[CacheAsideFetcher[str]] = None,
        **kwargs,
    ):
        headers = {
            "content-type": "application/json",
            "anthropic-version": api_version,
            "x-api-key": api_key,
        }
        super().__init__(base_url, timeout=timeout, headers=headers, **kwargs)
        self.default_model = default_model
        self.default_max_tokens = default_max_tokens
        self.default_temperature = default_temperature
        self.completions_cache = completions_cache

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        completions_cache: Optional[CacheAsideFetcher[str]] = None,
        **kwargs,
    ) -> "GenerativeTextClient":
        return cls(
            base_url=settings.GENERATIVE_API_BASE_URL,
            api_key=settings.GENERATIVE_API_KEY,
            api_version=settings.GENERATIVE_API_VERSION,
            default_model=settings.GENERATIVE_DEFAULT_MODEL,
            default_max_tokens=settings.GENERATIVE_DEFAULT_MAX_TOKENS,
            default_temperature=settings.GENERATIVE_DEFAULT_TEMPERATURE,
            timeout=settings.GENERATIVE_TIMEOUT,
            retry_policy=RetryPolicy.from_settings(settings),
            completions_cache=completions_cache,
            **kwargs,
        )

    async def send_request(self, request: MessagesRequest) -> MessagesResponse:
        """
        Send a structured request.

        POST /v1/messages with payload:
        {
            "model": "claude-3-5-sonnet-20241022",
            "max_tokens": 1000,
            "messages": [{"role": "user", "content": "..."}],
            "temperature": 0.7,
            "system": "..."
        }

        Raises:
            UpstreamError: Non-retryable HTTP status (bad request, auth)
            TransportError: Upstream unreachable
            RetriesExhausted: Transient failures outlasted the retry budget
        """
        logger.debug(
            "Sending request to generative API",
            model=request.model,
            messages=len(request.messages),
            max_tokens=request.max_tokens,
        )
        data = await self._execute(
            RequestDescriptor("POST", "/v1/messages", json=request.to_payload())
        )
        response = MessagesResponse.model_validate(data)

        usage = response.usage
        logger.info(
            "Received response from generative API",
            model=response.model,
            stop_reason=response.stop_reason,
            input_tokens=usage.input_tokens if usage else None,
            output_tokens=usage.output_tokens if usage else None,
        )
        return response

    async def complete(self, prompt: str, system: Optional[str] = None) -> Optional[str]:
        """Single-prompt completion; returns the first text segment."""
        return await self.conversation([Message(role="user", content=prompt)], system)

    async def complete_cached(self, prompt: str) -> Optional[str]:
        """Completion served cache-aside: identical prompts hit the upstream once."""
        if self.completions_cache is None:
            return await self.complete(prompt)
        return await self.completions_cache.fetch(
            "complete", [self.default_model, prompt], lambda: self.complete(prompt)
        )

    async def conversation(
        self, messages: List[Message], system: Optional[str] = None
    ) -> Optional[str]:
        """Multi-turn completion with default model parameters."""
        request = MessagesRequest(
            model=self.default_model,
            max_tokens=self.default_max_tokens,
            temperature=self.default_temperature,
            messages=messages,
            system=system,
        )
        response = await self.send_request(request)
        return response.first_text()

    async def analyze_text(self, text: str, analysis_type: str = "general") -> Optional[str]:
        """Analyze text (sentiment, summary, keywords, language, general)."""
        return await self.complete(text, prompts.analysis_prompt(analysis_type))

    async def generate_content(
        self,
        prompt: str,
        content_type: str = "general",
        creativity: Optional[float] = None,
    ) -> Optional[str]:
        """Creative generation with a larger token budget and higher temperature."""
        request = MessagesRequest(
            model=self.default_model,
            max_tokens=prompts.CONTENT_MAX_TOKENS,
            temperature=creativity if creativity is not None else prompts.DEFAULT_CREATIVITY,
            messages=[Message(role="user", content=prompt)],
            system=prompts.content_prompt(content_type),
        )
        response = await self.send_request(request)
        return response.first_text()

    async def health_check(self) -> bool:
        """Round-trip a tiny completion. Never raises."""
        try:
            text = await self.complete("Hello")
            healthy = bool(text and text.strip())
        except Exception as e:
            logger.warning("Generative API health check failed", error=str(e))
            healthy = False

        logger.info("Generative API health check", status="HEALTHY" if healthy else "UNHEALTHY")
        return healthy
