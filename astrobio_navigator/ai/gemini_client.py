# astrobio_navigator/ai/gemini_client.py

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from astrobio_navigator.config.settings import Settings, get_settings
from astrobio_navigator.errors import ModelCallError
from astrobio_navigator.models.analysis import UploadedDocument

logger = logging.getLogger(__name__)


@dataclass
class GeminiClientConfig:
    """
    Configuration for talking to the Gemini API.
    """

    api_key: Optional[str]
    model: str
    temperature: float = 0.2
    timeout_seconds: float = 120.0

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        *,
        model: Optional[str] = None,
    ) -> "GeminiClientConfig":
        s = settings or get_settings()
        return cls(
            api_key=s.gemini_api_key,
            model=model or s.GEMINI_MODEL,
            temperature=s.GEMINI_TEMPERATURE,
            timeout_seconds=s.GEMINI_TIMEOUT_SECONDS,
        )


class GeminiClient:
    """
    Thin synchronous wrapper around `google.genai`.

    Every SDK or transport failure is re-raised as ModelCallError, so
    callers only ever deal with one error type for "the model call failed".
    An empty answer is returned as "" and left to the caller to judge.
    """

    def __init__(
        self,
        config: Optional[GeminiClientConfig] = None,
        *,
        client: Optional[Any] = None,
    ) -> None:
        self.config = config or GeminiClientConfig.from_settings()
        self._client = client

    @property
    def model(self) -> str:
        return self.config.model

    def _get_client(self) -> Any:
        if self._client is None:
            if not self.config.api_key:
                raise ModelCallError(
                    "GEMINI_API_KEY is not configured",
                    model=self.config.model,
                )
            self._client = genai.Client(
                api_key=self.config.api_key,
                http_options=types.HttpOptions(
                    timeout=int(self.config.timeout_seconds * 1000)
                ),
            )
        return self._client

    def generate(
        self,
        prompt: str,
        *,
        document: Optional[UploadedDocument] = None,
        json_mode: bool = False,
        use_url_context: bool = False,
    ) -> str:
        """
        Send one prompt (optionally with an inline document) and return
        the response text.

        json_mode asks the API for a JSON-only answer. It can't be combined
        with the URL-context tool, which the API rejects.
        """
        if json_mode and use_url_context:
            raise ValueError("json_mode and use_url_context are mutually exclusive")

        contents: List[Any] = []
        if document is not None:
            contents.append(
                types.Part.from_bytes(data=document.content, mime_type=document.media_type)
            )
        contents.append(prompt)

        config_kwargs: Dict[str, Any] = {"temperature": self.config.temperature}
        if json_mode:
            config_kwargs["response_mime_type"] = "application/json"
        if use_url_context:
            config_kwargs["tools"] = [types.Tool(url_context=types.UrlContext())]
        config = types.GenerateContentConfig(**config_kwargs)

        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.config.model,
                contents=contents,
                config=config,
            )
        except genai_errors.APIError as exc:
            raise ModelCallError(
                f"Gemini API error ({exc.code}): {exc.message or exc}",
                status_code=exc.code,
                model=self.config.model,
            ) from exc
        except Exception as exc:  # noqa: BLE001
            raise ModelCallError(
                f"Error calling Gemini model {self.config.model}: {exc}",
                model=self.config.model,
            ) from exc

        text = response.text or ""
        logger.debug("Gemini %s returned %d characters", self.config.model, len(text))
        return text
