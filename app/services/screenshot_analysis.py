"""Service that turns an uploaded account screenshot into an ``InvestmentRecord``."""

from __future__ import annotations

import base64
import logging
from textwrap import dedent
from typing import Any, Mapping, Protocol

from app.clients.gemini import CompletionRequest
from app.core.config import GeminiSettings, UploadSettings
from app.schemas import InvestmentRecord
from app.services.uploads import UploadedImage, staged_upload

logger = logging.getLogger(__name__)


EXTRACTION_SYSTEM_PROMPT = dedent(
    """\
    You are a financial data extraction assistant. You receive a screenshot of
    an investment account and return exactly one JSON object describing the
    investment shown, with these keys:
      "name" (string): the investment's name.
      "type" (string): asset class, e.g. stock, ETF, bond, crypto, fund.
      "amount" (string or number): the invested or current amount.
      "purchaseDate" (string): purchase date as YYYY-MM-DD.
      "quantity" (string or number): number of units held.
      "ticker" (string): ticker symbol.
      "riskScore" (integer): risk from 1 (lowest) to 10 (highest).
      "grade" (string): one of F, D-, D, D+, C-, C, C+, B-, B, B+, A-, A, A+.
      "roiEstimate" (string): estimated return on investment as a percentage.
    Use the string "unknown" for any value that cannot be read from the image.
    Return only the JSON object, with no surrounding text or Markdown."""
)

EXTRACTION_USER_PROMPT = (
    "Extract the investment details from this screenshot and return them as "
    "a single JSON object using the required keys."
)


_NOT_PROVIDED = "Not provided"


class CompletionClient(Protocol):
    async def complete_json(self, request: CompletionRequest) -> dict[str, Any]:
        ...


def _join(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value) or _NOT_PROVIDED
    return str(value) if value else _NOT_PROVIDED


def format_user_profile(profile: Mapping[str, Any] | None) -> str | None:
    """Render the optional investor profile as a short bullet list."""
    if not profile:
        return None
    return "\n".join(
        (
            f"- Experience Level: {_join(profile.get('experience'))}",
            f"- Investment Goals: {_join(profile.get('goals'))}",
            f"- Risk Tolerance: {_join(profile.get('riskTolerance'))}",
            f"- Interests: {_join(profile.get('interests'))}",
        )
    )


def build_completion_request(
    image_base64: str,
    mime_type: str,
    *,
    max_output_tokens: int,
    user_notes: str | None = None,
    user_profile: Mapping[str, Any] | None = None,
) -> CompletionRequest:
    """Assemble the fixed extraction prompt around one encoded image."""
    notes = (user_notes or "").strip() or None
    return CompletionRequest(
        system_instruction=EXTRACTION_SYSTEM_PROMPT,
        user_instruction=EXTRACTION_USER_PROMPT,
        image_mime_type=mime_type,
        image_base64=image_base64,
        max_output_tokens=max_output_tokens,
        user_notes=notes,
        user_profile=format_user_profile(user_profile),
    )


class ScreenshotAnalysisService:
    """Stage an upload, ask the completion service about it, and normalize the reply."""

    def __init__(
        self,
        completion_client: CompletionClient,
        *,
        upload_settings: UploadSettings,
        gemini_settings: GeminiSettings,
    ) -> None:
        self._client = completion_client
        self._upload_settings = upload_settings
        self._max_output_tokens = gemini_settings.max_output_tokens

    async def analyze(
        self,
        image: UploadedImage,
        *,
        notes: str | None = None,
        profile: Mapping[str, Any] | None = None,
    ) -> InvestmentRecord:
        with staged_upload(image, self._upload_settings.temp_dir) as path:
            encoded = base64.b64encode(path.read_bytes()).decode("ascii")
            request = build_completion_request(
                encoded,
                image.mime_type,
                max_output_tokens=self._max_output_tokens,
                user_notes=notes,
                user_profile=profile,
            )
            logger.info(
                "Requesting extraction for %s (%s, %d bytes)",
                image.filename,
                image.mime_type,
                image.size,
            )
            payload = await self._client.complete_json(request)

        return InvestmentRecord.model_validate(payload)


__all__ = [
    "EXTRACTION_SYSTEM_PROMPT",
    "EXTRACTION_USER_PROMPT",
    "CompletionClient",
    "ScreenshotAnalysisService",
    "build_completion_request",
    "format_user_profile",
]
