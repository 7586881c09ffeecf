try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import base64

import pytest

from app.clients.gemini import GeminiModelError
from app.core.config import GeminiSettings, UploadSettings
from app.schemas import InvestmentRecord
from app.services.screenshot_analysis import (
    EXTRACTION_SYSTEM_PROMPT,
    EXTRACTION_USER_PROMPT,
    ScreenshotAnalysisService,
    build_completion_request,
    format_user_profile,
)
from app.services.uploads import UploadedImage


class StubCompletionClient:
    def __init__(self, payload=None, error=None) -> None:
        self.payload = payload or {}
        self.error = error
        self.requests = []

    async def complete_json(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.payload


def _service(client, staging_dir, max_output_tokens=1000):
    return ScreenshotAnalysisService(
        client,
        upload_settings=UploadSettings(temp_dir=str(staging_dir)),
        gemini_settings=GeminiSettings(
            api_key="test-key", max_output_tokens=max_output_tokens
        ),
    )


def test_system_prompt_names_every_record_field():
    for key in (
        "name",
        "type",
        "amount",
        "purchaseDate",
        "quantity",
        "ticker",
        "riskScore",
        "grade",
        "roiEstimate",
    ):
        assert f'"{key}"' in EXTRACTION_SYSTEM_PROMPT


def test_build_completion_request_uses_fixed_prompts():
    request = build_completion_request(
        "aGVsbG8=",
        "image/png",
        max_output_tokens=1000,
        user_notes="   ",
    )

    assert request.system_instruction == EXTRACTION_SYSTEM_PROMPT
    assert request.user_instruction == EXTRACTION_USER_PROMPT
    assert request.image_data_uri == "data:image/png;base64,aGVsbG8="
    assert request.response_format == "json_object"
    assert request.max_output_tokens == 1000
    assert request.user_notes is None


@pytest.mark.asyncio
async def test_analyze_sends_encoded_image_and_returns_record(staging_dir):
    client = StubCompletionClient(
        payload={"name": "Tesla", "ticker": "TSLA", "riskScore": 8, "grade": "C+"}
    )
    service = _service(client, staging_dir, max_output_tokens=512)
    image = UploadedImage(data=b"fake-image", mime_type="image/webp", filename="t.webp")

    record = await service.analyze(image, notes="long-term hold")

    assert isinstance(record, InvestmentRecord)
    assert record.ticker == "TSLA"
    assert record.risk_score == 8
    assert record.amount == "unknown"
    request = client.requests[0]
    assert base64.b64decode(request.image_base64) == b"fake-image"
    assert request.image_mime_type == "image/webp"
    assert request.max_output_tokens == 512
    assert request.user_notes == "long-term hold"
    assert list(staging_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_analyze_removes_staged_file_when_completion_fails(staging_dir):
    client = StubCompletionClient(error=GeminiModelError("service unavailable"))
    service = _service(client, staging_dir)
    image = UploadedImage(data=b"img", mime_type="image/png", filename="a.png")

    with pytest.raises(GeminiModelError):
        await service.analyze(image)

    assert list(staging_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_concurrent_uploads_with_same_filename_do_not_collide(staging_dir):
    seen: list[str] = []

    class ListingClient:
        async def complete_json(self, request):
            seen.extend(path.name for path in staging_dir.iterdir())
            return {}

    service = _service(ListingClient(), staging_dir)
    first = UploadedImage(data=b"1", mime_type="image/png", filename="same.png")
    second = UploadedImage(data=b"2", mime_type="image/png", filename="same.png")

    await service.analyze(first)
    await service.analyze(second)

    assert first.storage_key != second.storage_key
    assert seen == [first.storage_key, second.storage_key]


def test_format_user_profile_lists_each_field():
    profile = {
        "experience": "intermediate",
        "goals": ["retirement", "income"],
        "riskTolerance": "moderate",
    }

    assert format_user_profile(profile) == (
        "- Experience Level: intermediate\n"
        "- Investment Goals: retirement, income\n"
        "- Risk Tolerance: moderate\n"
        "- Interests: Not provided"
    )


def test_format_user_profile_skips_empty_profiles():
    assert format_user_profile(None) is None
    assert format_user_profile({}) is None


def test_build_completion_request_keeps_prompts_fixed_with_profile():
    request = build_completion_request(
        "aGVsbG8=",
        "image/png",
        max_output_tokens=1000,
        user_profile={"experience": "beginner", "interests": []},
    )

    assert request.system_instruction == EXTRACTION_SYSTEM_PROMPT
    assert request.user_instruction == EXTRACTION_USER_PROMPT
    assert "- Experience Level: beginner" in request.user_profile
    assert "- Interests: Not provided" in request.user_profile


def test_investment_record_serializes_nested_values_as_json():
    record = InvestmentRecord.model_validate(
        {
            "amount": {"value": 1500, "currency": "USD"},
            "quantity": [10, 5],
            "ticker": True,
        }
    )

    body = record.to_response()
    assert body["amount"] == '{"value": 1500, "currency": "USD"}'
    assert body["quantity"] == "[10, 5]"
    assert body["ticker"] == "true"
