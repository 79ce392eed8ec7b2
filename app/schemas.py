"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field

from models.records import LineDiagnostic, LogFormat


class SkippedLine(BaseModel):
    """A line or sensor entry dropped while parsing the upload."""

    line_number: int = Field(..., ge=1)
    line: str
    reason: str

    @classmethod
    def from_diagnostic(cls, diagnostic: LineDiagnostic) -> "SkippedLine":
        return cls(
            line_number=diagnostic.line_number,
            line=diagnostic.line,
            reason=diagnostic.reason,
        )


class EvaluationResponse(BaseModel):
    """Classification of every sensor in an uploaded log."""

    file_name: str
    format: LogFormat
    results: Dict[str, str] = Field(
        default_factory=dict,
        description="Sensor name mapped to keep, discard, precise, very precise or ultra precise.",
    )
    sensor_count: int = Field(..., ge=0)
    processing_ms: float = Field(
        ..., ge=0, description="Duration in milliseconds spent evaluating the log."
    )
    diagnostics: List[SkippedLine] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    detail: str
