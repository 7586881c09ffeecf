"""Client wrapper for extracting structured data from images with Google Gemini."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import math
import re
from dataclasses import dataclass
from typing import Any

import google.generativeai as genai
from google.api_core.exceptions import GoogleAPICallError

from app.core.config import GeminiSettings

logger = logging.getLogger(__name__)

JSON_MIME_TYPE = "application/json"

_FENCED_JSON = re.compile(r"```(?:json)?\s*(.*?)\s*```", re.DOTALL | re.IGNORECASE)
_LOGGED_URI_LENGTH = 64


class GeminiModelError(RuntimeError):
    """Raised when Gemini rejects or fails a request."""


class CompletionResponseError(ValueError):
    """Raised when the completion text is not a single JSON object."""


@dataclass(frozen=True, slots=True)
class CompletionRequest:
    """Everything sent to the completion service for one screenshot."""

    system_instruction: str
    user_instruction: str
    image_mime_type: str
    image_base64: str
    max_output_tokens: int
    user_notes: str | None = None
    user_profile: str | None = None
    response_format: str = "json_object"

    @property
    def image_data_uri(self) -> str:
        """The image as a `data:<mime>;base64,<payload>` URI."""
        return f"data:{self.image_mime_type};base64,{self.image_base64}"


class GeminiClient:
    """Send one multimodal request per call to the configured vision model."""

    def __init__(self, settings: GeminiSettings) -> None:
        self._settings = settings
        genai.configure(api_key=settings.api_key)

    @property
    def model_name(self) -> str:
        return self._settings.vision_model_name

    async def complete_json(self, request: CompletionRequest) -> dict[str, Any]:
        """Run ``request`` and parse the reply as a JSON object."""
        logger.debug(
            "Sending %s to %s",
            _truncate(request.image_data_uri, _LOGGED_URI_LENGTH),
            self.model_name,
        )

        def _invoke() -> str:
            model = genai.GenerativeModel(
                self.model_name,
                system_instruction=request.system_instruction,
                generation_config=_generation_config(request),
            )
            try:
                response = model.generate_content(
                    _build_parts(request),
                    safety_settings=[],
                )
            except GoogleAPICallError as exc:  # pragma: no cover - network call
                raise GeminiModelError(
                    f"Gemini vision generate_content failed: {exc.message}"
                ) from exc
            try:
                return response.text or ""
            except ValueError as exc:
                raise CompletionResponseError(
                    f"Gemini returned no text content: {exc}"
                ) from exc

        raw = await asyncio.to_thread(_invoke)
        logger.debug("Gemini raw response: %s", raw)
        return parse_json_object(raw)


def _generation_config(request: CompletionRequest) -> dict[str, Any]:
    config: dict[str, Any] = {"max_output_tokens": request.max_output_tokens}
    if request.response_format == "json_object":
        config["response_mime_type"] = JSON_MIME_TYPE
    return config


def _build_parts(request: CompletionRequest) -> list[Any]:
    """Lay out the user turn: instruction, optional context, then the image."""
    parts: list[Any] = [request.user_instruction]
    if request.user_profile:
        parts.append(f"User profile:\n{request.user_profile}")
    if request.user_notes:
        parts.append(f"Additional notes from the user: {request.user_notes}")
    parts.append(
        {
            "mime_type": request.image_mime_type,
            "data": base64.b64decode(request.image_base64),
        }
    )
    return parts


def _truncate(value: str, max_len: int) -> str:
    if len(value) > max_len:
        return value[: max_len - 3] + "..."
    return value


def _reject_constant(name: str) -> float:
    raise CompletionResponseError(
        f"Completion service returned a non-finite number: {name}"
    )


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise CompletionResponseError(
            f"Completion service returned a number out of range: {text}"
        )
    return value


def parse_json_object(payload: str) -> dict[str, Any]:
    """Decode ``payload`` into a dict, unwrapping a Markdown code fence if present."""
    text = payload.strip()
    fenced = _FENCED_JSON.search(text)
    if fenced:
        text = fenced.group(1).strip()
    if not text:
        raise CompletionResponseError("Completion service returned an empty response.")
    try:
        parsed = json.loads(
            text,
            parse_constant=_reject_constant,
            parse_float=_finite_float,
        )
    except json.JSONDecodeError as exc:
        raise CompletionResponseError(
            f"Completion service returned malformed JSON: {exc.msg}"
        ) from exc
    if not isinstance(parsed, dict):
        raise CompletionResponseError(
            "Completion service returned JSON that is not an object."
        )
    return parsed


__all__ = [
    "CompletionRequest",
    "CompletionResponseError",
    "GeminiClient",
    "GeminiModelError",
    "parse_json_object",
]
