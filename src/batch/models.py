# src/batch/models.py - v2
"""Batch models: source documents discovered on disk and run outcomes."""

from __future__ import annotations

from pydantic import BaseModel, Field

from leaseorganizer.core.models import GroupingResult


class SourceDocument(BaseModel):
    """A document read from disk, ready for classification."""

    id: str
    filename: str
    extension: str
    content: str


class ScanError(BaseModel):
    """A file (or folder) that could not be read."""

    filename: str
    error: str


class ScanResult(BaseModel):
    """Documents found in a folder, sorted by filename."""

    documents: list[SourceDocument] = Field(default_factory=list)
    errors: list[ScanError] = Field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.documents)


class DocumentFailure(BaseModel):
    """A document skipped because the capability failed on it."""

    id: str
    filename: str
    error: str


class BatchRunResult(BaseModel):
    """Outcome of one organize run."""

    run_id: str
    result: GroupingResult
    processed: int
    from_cache: int
    chunked: int
    failures: list[DocumentFailure] = Field(default_factory=list)
    snapshot_saved: bool = False
    duration_seconds: float
