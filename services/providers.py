"""
Provider adapters for the upstream LLM services.
Each adapter translates canonical messages into its provider's wire format and
normalizes the provider's response into a ProviderResult.
"""
import json
from abc import ABC, abstractmethod
from typing import AsyncIterator, Dict, List, Optional, Type

import httpx

from exceptions import ProviderNotConfiguredError, ProviderTimeoutError, UpstreamError
from models.api_models import ChatSettings
from models.chat_models import (
    CanonicalMessage,
    OrchestratorConfig,
    ProviderId,
    ProviderProfile,
    ProviderResult,
    Role,
)
from utils.constants import EMPTY_PROVIDER_RESPONSE, MALFORMED_RESPONSE_BODY, SSE
from utils.http_client import HTTPClientManager
from utils.logger import app_logger


class ProviderAdapter(ABC):
    """Base class for provider adapters."""

    provider_id: ProviderId

    def __init__(self, profile: ProviderProfile, timeout: float = 30.0):
        self.profile = profile
        self.timeout = timeout

    @property
    def name(self) -> str:
        return self.provider_id.value

    @property
    def label(self) -> str:
        """Human-readable model label."""
        return self.profile.label

    @abstractmethod
    async def call(self, messages: List[CanonicalMessage], settings: ChatSettings) -> ProviderResult:
        """
        Send a non-streaming chat request.

        Raises:
            UpstreamError: On non-2xx responses, transport failures or timeouts
        """

    @abstractmethod
    def stream(self, messages: List[CanonicalMessage], settings: ChatSettings) -> AsyncIterator[str]:
        """Send a streaming chat request and yield text chunks as they arrive."""

    @abstractmethod
    async def probe(self) -> bool:
        """Lightweight connectivity check against the provider."""

    def _ensure_configured(self) -> None:
        if not self.profile.configured:
            raise ProviderNotConfiguredError(self.name)

    def _resolve_model(self, settings: ChatSettings) -> str:
        if settings.model == "auto":
            return self.profile.default_model
        return settings.model

    async def _post_json(self, url: str, payload: dict, headers: Optional[dict] = None, params: Optional[dict] = None) -> dict:
        """POST a JSON payload and return the decoded JSON body."""
        client = HTTPClientManager.get_provider_client()

        try:
            response = await client.post(url, json=payload, headers=headers, params=params, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self.timeout) from e
        except httpx.HTTPError as e:
            raise UpstreamError(self.name, None, str(e) or e.__class__.__name__) from e

        if not response.is_success:
            raise UpstreamError(self.name, response.status_code, response.text)

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamError(self.name, response.status_code, f"Invalid JSON body: {response.text[:200]}") from e

        if not isinstance(data, dict):
            raise UpstreamError(self.name, response.status_code, MALFORMED_RESPONSE_BODY)
        return data

    async def _stream_sse_data(self, url: str, payload: dict, headers: Optional[dict] = None, params: Optional[dict] = None) -> AsyncIterator[dict]:
        """POST a streaming request and yield each decoded `data:` event."""
        client = HTTPClientManager.get_provider_client()

        try:
            async with client.stream("POST", url, json=payload, headers=headers, params=params, timeout=self.timeout) as response:
                if not response.is_success:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise UpstreamError(self.name, response.status_code, body)

                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue

                    data = line[len("data:"):].strip()
                    if data == SSE.DONE_SENTINEL:
                        return

                    try:
                        event = json.loads(data)
                    except json.JSONDecodeError:
                        app_logger.debug(f"{self.name}: skipping undecodable stream line: {data[:100]}")
                        continue

                    if not isinstance(event, dict):
                        raise UpstreamError(self.name, response.status_code, MALFORMED_RESPONSE_BODY)
                    yield event
        except httpx.TimeoutException as e:
            raise ProviderTimeoutError(self.name, self.timeout) from e
        except httpx.HTTPError as e:
            raise UpstreamError(self.name, None, str(e) or e.__class__.__name__) from e

    async def _probe_get(self, url: str, headers: Optional[dict] = None, params: Optional[dict] = None) -> bool:
        if not self.profile.configured:
            return False

        client = HTTPClientManager.get_provider_client()
        try:
            response = await client.get(url, headers=headers, params=params, timeout=self.timeout)
            return response.is_success
        except httpx.HTTPError as e:
            app_logger.warning(f"{self.name} connectivity probe failed: {e}")
            return False


class OpenAICompatibleAdapter(ProviderAdapter):
    """Adapter for providers exposing an OpenAI-style chat completions API."""

    # Wire name of the completion length limit
    max_tokens_field: str = "max_tokens"

    @property
    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.profile.api_key}"}

    def build_payload(self, messages: List[CanonicalMessage], settings: ChatSettings, stream: bool = False) -> dict:
        """Translate canonical messages and settings into the request body."""
        return {
            "model": self._resolve_model(settings),
            "messages": [msg.as_dict() for msg in messages],
            "temperature": settings.temperature,
            self.max_tokens_field: settings.max_tokens,
            "top_p": settings.top_p,
            "stream": stream,
        }

    @classmethod
    def parse_response(cls, data: dict) -> ProviderResult:
        """
        Extract content and token usage from a chat completions body.

        Raises:
            UpstreamError: Body does not have the chat completions shape
        """
        try:
            choices = data.get("choices") or [{}]
            message = choices[0].get("message") or {}
            usage = data.get("usage") or {}
            content = message.get("content")
            tokens = usage.get("total_tokens") or 0
        except (AttributeError, TypeError, IndexError, KeyError) as e:
            raise UpstreamError(cls.provider_id.value, None, MALFORMED_RESPONSE_BODY) from e

        if content is not None and not isinstance(content, str):
            raise UpstreamError(cls.provider_id.value, None, MALFORMED_RESPONSE_BODY)

        return ProviderResult(
            content=content or EMPTY_PROVIDER_RESPONSE,
            tokens_used=tokens,
            raw=data
        )

    def _stream_delta(self, event: dict) -> Optional[str]:
        try:
            choices = event.get("choices") or [{}]
            delta = (choices[0].get("delta") or {}).get("content")
        except (AttributeError, TypeError, IndexError, KeyError) as e:
            raise UpstreamError(self.name, None, MALFORMED_RESPONSE_BODY) from e

        if delta is not None and not isinstance(delta, str):
            raise UpstreamError(self.name, None, MALFORMED_RESPONSE_BODY)
        return delta

    async def call(self, messages: List[CanonicalMessage], settings: ChatSettings) -> ProviderResult:
        self._ensure_configured()
        payload = self.build_payload(messages, settings)

        app_logger.info(f"Calling {self.name} (model: {payload['model']}, messages: {len(messages)})")
        data = await self._post_json(f"{self.profile.base_url}/chat/completions", payload, headers=self._headers)
        return self.parse_response(data)

    async def stream(self, messages: List[CanonicalMessage], settings: ChatSettings) -> AsyncIterator[str]:
        self._ensure_configured()
        payload = self.build_payload(messages, settings, stream=True)

        app_logger.info(f"Streaming from {self.name} (model: {payload['model']})")
        async for event in self._stream_sse_data(f"{self.profile.base_url}/chat/completions", payload, headers=self._headers):
            delta = self._stream_delta(event)
            if delta:
                yield delta

    async def probe(self) -> bool:
        return await self._probe_get(f"{self.profile.base_url}/models", headers=self._headers)


class GroqAdapter(OpenAICompatibleAdapter):
    """Groq chat completions."""
    provider_id = ProviderId.GROQ
    max_tokens_field = "max_completion_tokens"


class TogetherAdapter(OpenAICompatibleAdapter):
    """Together AI chat completions."""
    provider_id = ProviderId.TOGETHER
    max_tokens_field = "max_tokens"


class GeminiAdapter(ProviderAdapter):
    """
    Google Gemini generateContent API.

    Gemini has its own wire protocol: assistant turns use the "model" role,
    every other role (system included) is sent as "user", and generation
    parameters nest under generationConfig.
    """

    provider_id = ProviderId.GEMINI

    def __init__(self, profile: ProviderProfile, timeout: float = 30.0, thinking_budget: int = 10467):
        super().__init__(profile, timeout)
        self.thinking_budget = thinking_budget

    def _resolve_model(self, settings: ChatSettings) -> str:
        # Requested model ids belong to the OpenAI-style providers
        return self.profile.default_model

    @property
    def _params(self) -> dict:
        return {"key": self.profile.api_key}

    def build_payload(self, messages: List[CanonicalMessage], settings: ChatSettings) -> dict:
        """Translate canonical messages and settings into a generateContent body."""
        generation_config = {
            "temperature": settings.temperature,
            "maxOutputTokens": settings.max_tokens,
            "topP": settings.top_p,
        }
        if settings.enable_thinking:
            generation_config["thinkingConfig"] = {"thinkingBudget": self.thinking_budget}

        payload = {
            "contents": [
                {
                    "role": "model" if msg.role == Role.ASSISTANT else "user",
                    "parts": [{"text": msg.content}],
                }
                for msg in messages
            ],
            "generationConfig": generation_config,
        }
        if settings.enable_search:
            payload["tools"] = [{"codeExecution": {}}]

        return payload

    @classmethod
    def _candidate_texts(cls, data: dict) -> List[Optional[str]]:
        """Text of each part of the first candidate."""
        try:
            candidates = data.get("candidates") or [{}]
            content = candidates[0].get("content") or {}
            return [part.get("text") for part in content.get("parts") or []]
        except (AttributeError, TypeError, IndexError, KeyError) as e:
            raise UpstreamError(cls.provider_id.value, None, MALFORMED_RESPONSE_BODY) from e

    @classmethod
    def parse_response(cls, data: dict) -> ProviderResult:
        """Extract the first candidate text and token usage."""
        texts = cls._candidate_texts(data)
        usage = data.get("usageMetadata") or {}
        if texts and texts[0] is not None and not isinstance(texts[0], str):
            raise UpstreamError(cls.provider_id.value, None, MALFORMED_RESPONSE_BODY)
        if not isinstance(usage, dict):
            raise UpstreamError(cls.provider_id.value, None, MALFORMED_RESPONSE_BODY)

        return ProviderResult(
            content=(texts[0] if texts else None) or EMPTY_PROVIDER_RESPONSE,
            tokens_used=usage.get("totalTokenCount") or 0,
            raw=data
        )

    async def call(self, messages: List[CanonicalMessage], settings: ChatSettings) -> ProviderResult:
        self._ensure_configured()
        model = self._resolve_model(settings)
        payload = self.build_payload(messages, settings)

        app_logger.info(f"Calling {self.name} (model: {model}, messages: {len(messages)})")
        data = await self._post_json(
            f"{self.profile.base_url}/models/{model}:generateContent",
            payload,
            params=self._params
        )
        return self.parse_response(data)

    async def stream(self, messages: List[CanonicalMessage], settings: ChatSettings) -> AsyncIterator[str]:
        self._ensure_configured()
        model = self._resolve_model(settings)
        payload = self.build_payload(messages, settings)

        app_logger.info(f"Streaming from {self.name} (model: {model})")
        async for event in self._stream_sse_data(
            f"{self.profile.base_url}/models/{model}:streamGenerateContent",
            payload,
            params={"alt": "sse", **self._params}
        ):
            for text in self._candidate_texts(event):
                if text and not isinstance(text, str):
                    raise UpstreamError(self.name, None, MALFORMED_RESPONSE_BODY)
                if text:
                    yield text

    async def probe(self) -> bool:
        return await self._probe_get(f"{self.profile.base_url}/models", params=self._params)


ADAPTERS: Dict[ProviderId, Type[ProviderAdapter]] = {
    ProviderId.GROQ: GroqAdapter,
    ProviderId.TOGETHER: TogetherAdapter,
    ProviderId.GEMINI: GeminiAdapter,
}


def get_adapter(provider: ProviderId, config: OrchestratorConfig) -> ProviderAdapter:
    """Build the adapter for a provider from the orchestration config."""
    profile = config.profile(provider)

    if provider == ProviderId.GEMINI:
        return GeminiAdapter(profile, timeout=config.provider_timeout, thinking_budget=config.thinking_budget)

    return ADAPTERS[provider](profile, timeout=config.provider_timeout)
