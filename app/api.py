"""HTTP route definitions for the service."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status

from app.schemas import ErrorResponse, EvaluationResponse, SkippedLine
from models.errors import LogEvaluationError, UnsupportedFormatError
from services.evaluation import detect_format, evaluate_log_file_with_report
from settings import Settings, get_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def get_app_settings() -> Settings:
    return get_settings()


def _resolve_format(filename: str, declared: Optional[str], settings: Settings) -> str:
    if declared:
        return declared.strip().lower()
    return detect_format(filename) or settings.default_log_format


@router.post(
    "/evaluations",
    response_model=EvaluationResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_413_CONTENT_TOO_LARGE: {"model": ErrorResponse},
        status.HTTP_415_UNSUPPORTED_MEDIA_TYPE: {"model": ErrorResponse},
        status.HTTP_422_UNPROCESSABLE_CONTENT: {"model": ErrorResponse},
    },
    summary="Upload a JSON or text sensor log and classify every sensor.",
)
async def evaluate_upload(
    file: UploadFile = File(..., description="Sensor log in .json or .txt format."),
    log_format: Optional[str] = Query(
        None,
        alias="format",
        description="Overrides the format implied by the file extension.",
    ),
    settings: Settings = Depends(get_app_settings),
) -> EvaluationResponse:
    file_name = Path(file.filename or "upload").name
    try:
        contents = await file.read()
    finally:
        await file.close()

    if not contents:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty.",
        )
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_CONTENT_TOO_LARGE,
            detail=f"Uploaded file exceeds {settings.max_upload_bytes} bytes.",
        )

    try:
        text = contents.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is not valid UTF-8 text.",
        ) from exc

    declared_format = _resolve_format(file_name, log_format, settings)
    try:
        report = evaluate_log_file_with_report(text, declared_format)
    except UnsupportedFormatError as exc:
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=str(exc),
        ) from exc
    except LogEvaluationError as exc:
        logger.info(
            "Rejected upload",
            extra={"file_name": file_name, "file_format": declared_format, "error": str(exc)},
        )
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
            detail=str(exc),
        ) from exc

    return EvaluationResponse(
        file_name=file_name,
        format=declared_format,
        results=report.results,
        sensor_count=report.sensor_count,
        processing_ms=report.processing_ms,
        diagnostics=[SkippedLine.from_diagnostic(item) for item in report.diagnostics],
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "POST a log to /evaluations."}
