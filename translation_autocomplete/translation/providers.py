"""HTTP clients for the supported translation services.

Each provider performs one POST per text. Failures are raised as
``ProviderError``; HTTP 429 is raised as ``RateLimitError`` so the
executor can retry it.
"""

import asyncio
from typing import Any, Dict, Optional, Type

import aiohttp
import structlog

from ..config import Settings
from ..errors import ProviderError, RateLimitError

logger = structlog.get_logger()


class TranslationProvider:
    """Base class for translation service clients.

    Use as an async context manager to share one HTTP session across calls.
    """

    name = "base"

    def __init__(
        self,
        api_key: str,
        source_language: str = "en",
        timeout: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.api_key = api_key
        self.source_language = source_language
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "TranslationProvider":
        if self._session is None:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            raise RuntimeError(f"{type(self).__name__} used outside 'async with'")
        return self._session

    async def translate(self, text: str, target_language: str) -> str:
        """Translate ``text`` into ``target_language``.

        Raises:
            RateLimitError: If the service answered HTTP 429
            ProviderError: On any other failure or an unusable response
        """
        url, payload, headers = self.build_request(text, target_language)
        data = await self._post(url, payload, headers, target_language)
        try:
            translated = self.parse_response(data)
            if not isinstance(translated, str):
                raise TypeError(f"expected text, got {type(translated).__name__}")
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise ProviderError(
                f"Unexpected {self.name} response: {str(data)[:200]}",
                service=self.name,
                language=target_language,
                previous_error=e,
            ) from e
        return translated.strip()

    def build_request(self, text: str, target_language: str):
        raise NotImplementedError

    def parse_response(self, data: Dict[str, Any]) -> str:
        raise NotImplementedError

    async def _post(self, url: str, payload: Dict[str, Any], headers: Dict[str, str], target_language: str) -> Any:
        try:
            async with self.session.post(url, json=payload, headers=headers) as response:
                if response.status == 429:
                    retry_after = response.headers.get("Retry-After")
                    raise RateLimitError(
                        f"{self.name} rate limit exceeded",
                        service=self.name,
                        language=target_language,
                        retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
                    )
                if response.status >= 400:
                    body = await response.text()
                    raise ProviderError(
                        f"{self.name} returned HTTP {response.status}: {body[:200]}",
                        service=self.name,
                        language=target_language,
                        status=response.status,
                    )
                return await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise ProviderError(
                f"{self.name} request failed: {str(e) or type(e).__name__}",
                service=self.name,
                language=target_language,
                previous_error=e,
            ) from e


class GoogleTranslateProvider(TranslationProvider):
    """Google Cloud Translation v2 REST API."""

    name = "google"
    url = "https://translation.googleapis.com/language/translate/v2"

    def build_request(self, text, target_language):
        payload = {"q": text, "target": target_language, "source": self.source_language}
        return f"{self.url}?key={self.api_key}", payload, {}

    def parse_response(self, data):
        return data["data"]["translations"][0]["translatedText"]


class DeepLProvider(TranslationProvider):
    """DeepL API (free tier endpoint)."""

    name = "deepl"
    url = "https://api-free.deepl.com/v2/translate"

    def build_request(self, text, target_language):
        payload = {
            "text": [text],
            "target_lang": target_language.upper(),
            "source_lang": self.source_language.upper(),
        }
        return self.url, payload, {"Authorization": f"DeepL-Auth-Key {self.api_key}"}

    def parse_response(self, data):
        return data["translations"][0]["text"]


class OpenAIProvider(TranslationProvider):
    """OpenAI chat completions used as a translator."""

    name = "openai"
    url = "https://api.openai.com/v1/chat/completions"
    model = "gpt-4"

    def build_request(self, text, target_language):
        payload = {
            "model": self.model,
            "messages": [
                {
                    "role": "system",
                    "content": f"You are a professional translator. Translate the following text to {target_language}:",
                },
                {"role": "user", "content": text},
            ],
            "max_tokens": 100,
        }
        return self.url, payload, {"Authorization": f"Bearer {self.api_key}"}

    def parse_response(self, data):
        return data["choices"][0]["message"]["content"]


class GeminiProvider(TranslationProvider):
    """Google generative language API."""

    name = "gemini"
    url = "https://generativelanguage.googleapis.com/v1/models/gemini-pro:generateText"

    def build_request(self, text, target_language):
        payload = {
            "prompt": {"text": f'Translate the following text to {target_language}: "{text}"'},
            "max_output_tokens": 100,
        }
        return self.url, payload, {"Authorization": f"Bearer {self.api_key}"}

    def parse_response(self, data):
        return data["candidates"][0]["output"]


PROVIDERS: Dict[str, Type[TranslationProvider]] = {
    GoogleTranslateProvider.name: GoogleTranslateProvider,
    DeepLProvider.name: DeepLProvider,
    OpenAIProvider.name: OpenAIProvider,
    GeminiProvider.name: GeminiProvider,
}


def create_provider(settings: Settings, session: Optional[aiohttp.ClientSession] = None) -> TranslationProvider:
    """Build the provider selected by ``settings.translation_service``."""
    try:
        provider_class = PROVIDERS[settings.translation_service]
    except KeyError:
        raise ValueError(f"Invalid translation service: {settings.translation_service}") from None
    return provider_class(
        api_key=settings.api_key,
        source_language=settings.source_language,
        timeout=settings.request_timeout,
        session=session,
    )


async def translate_text(provider: TranslationProvider, text: str, target_language: str) -> str:
    """Translate one text, returning an empty string on failure."""
    try:
        return await provider.translate(text, target_language)
    except ProviderError as e:
        logger.warning("Translation error", service=provider.name, language=target_language, error=str(e))
        return ""
