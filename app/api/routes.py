"""
FastAPI routes for the investment screenshot analyzer.
"""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.datastructures import UploadFile

from app.core.config import UploadSettings
from app.dependencies import get_screenshot_analysis_service, get_upload_settings
from app.schemas import AnalysisErrorResponse, GradeScale, GradeView
from app.services.grading import describe_grade, grade_scale, render_grade_arc
from app.services.uploads import ensure_declared_size, read_upload

router = APIRouter()
logger = logging.getLogger(__name__)

NO_FILE_ERROR = "No screenshot file uploaded."
ANALYSIS_FAILED_ERROR = "Failed to analyze screenshot."
NOTES_FIELD = "additionalNotes"
PROFILE_FIELD = "userProfile"
_ALLOWED_ANALYSIS_METHODS = ("POST",)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post("/analyze-screenshot", status_code=HTTPStatus.OK)
async def analyze_screenshot(
    request: Request,
    service: Annotated[Any, Depends(get_screenshot_analysis_service)],
    upload_settings: Annotated[UploadSettings, Depends(get_upload_settings)],
) -> JSONResponse:
    """Extract an investment record from a multipart screenshot upload."""
    try:
        ensure_declared_size(
            request.headers.get("content-length"),
            max_bytes=upload_settings.max_bytes,
        )
        async with request.form() as form:
            upload = form.get(upload_settings.field_name)
            if not isinstance(upload, UploadFile):
                return JSONResponse(
                    status_code=HTTPStatus.BAD_REQUEST,
                    content=AnalysisErrorResponse(error=NO_FILE_ERROR).model_dump(
                        exclude_none=True
                    ),
                )
            notes = form.get(NOTES_FIELD)
            profile = _parse_user_profile(form.get(PROFILE_FIELD))
            image = await read_upload(upload, max_bytes=upload_settings.max_bytes)

        logger.info(
            "Received screenshot %s (%s, %d bytes)",
            image.filename,
            image.mime_type,
            image.size,
        )
        record = await service.analyze(
            image,
            notes=notes if isinstance(notes, str) else None,
            profile=profile,
        )
        return JSONResponse(status_code=HTTPStatus.OK, content=record.to_response())
    except Exception as exc:
        logger.exception("Error analyzing screenshot")
        return JSONResponse(
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            content=AnalysisErrorResponse(
                error=ANALYSIS_FAILED_ERROR,
                details=str(exc),
            ).model_dump(),
        )


def _parse_user_profile(raw: Any) -> dict[str, Any] | None:
    """Decode the optional ``userProfile`` form field; malformed JSON raises."""
    if not isinstance(raw, str) or not raw.strip():
        return None
    profile = json.loads(raw)
    if not isinstance(profile, dict):
        raise ValueError("userProfile must be a JSON object.")
    return profile


@router.api_route(
    "/analyze-screenshot",
    methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def analyze_screenshot_method_not_allowed(request: Request) -> Response:
    return PlainTextResponse(
        f"Method {request.method} Not Allowed",
        status_code=HTTPStatus.METHOD_NOT_ALLOWED,
        headers={"Allow": ", ".join(_ALLOWED_ANALYSIS_METHODS)},
    )


@router.get("/grades", status_code=HTTPStatus.OK, response_model=GradeScale)
async def list_grades() -> GradeScale:
    """Return every letter grade with its progress fraction and colour."""
    return grade_scale()


@router.get("/grades/{grade}", status_code=HTTPStatus.OK, response_model=GradeView)
async def get_grade(grade: str) -> GradeView:
    return describe_grade(grade)


@router.get("/grades/{grade}/arc.svg", status_code=HTTPStatus.OK)
async def get_grade_arc(
    grade: str,
    size: int = Query(100, ge=16, le=1024, description="Rendered width and height."),
) -> Response:
    """Render the grade as an SVG progress arc."""
    return Response(content=render_grade_arc(grade, size=size), media_type="image/svg+xml")


__all__ = ["router"]
