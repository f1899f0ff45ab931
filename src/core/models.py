# src/core/models.py - v3
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.

Persisted models serialize with camelCase keys (``documentType``,
``leaseFile``, ``totalDocuments``...) so cache and grouping files stay
readable by earlier tooling. Python attributes are snake_case and both
spellings are accepted on input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

if TYPE_CHECKING:
    from leaseorganizer.config.settings import Settings

# Reserved value for an extraction field the capability could not resolve.
UNKNOWN = "unknown"

DocumentType = Literal[
    "lease", "amendment", "rent_commencement", "delivery_letter", "other"
]
Confidence = Literal["high", "medium", "low"]

DOCUMENT_TYPES: tuple[str, ...] = get_args(DocumentType)
CONFIDENCE_LEVELS: tuple[str, ...] = get_args(Confidence)


class CamelModel(BaseModel):
    """Base for models persisted as camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict using the persisted key names."""
        return self.model_dump(mode="json", by_alias=True)


# === CAPABILITY OUTPUTS ===


class Classification(CamelModel):
    """Document type label produced by the classification capability."""

    document_type: DocumentType
    confidence: Confidence
    reasoning: str = ""

    @field_validator("document_type", mode="before")
    @classmethod
    def coerce_document_type(cls, v: Any) -> Any:
        """Unrecognized labels are filed as ``other``."""
        if isinstance(v, str):
            label = v.strip().lower()
            return label if label in DOCUMENT_TYPES else "other"
        return v

    @field_validator("confidence", mode="before")
    @classmethod
    def coerce_confidence(cls, v: Any) -> Any:
        if isinstance(v, str):
            level = v.strip().lower()
            return level if level in CONFIDENCE_LEVELS else "low"
        return v


class ExtractionResult(CamelModel):
    """Grouping keys extracted from a document.

    ``lessor``, ``address`` and ``tenant`` are ``None`` while unresolved.
    The ``"unknown"`` sentinel only exists at the serialization boundary:
    it is parsed to ``None`` on input and written back on output.
    """

    lessor: str | None = None
    address: str | None = None
    tenant: str | None = None
    base_reference: str | None = None

    @field_validator("lessor", "address", "tenant", mode="before")
    @classmethod
    def parse_sentinel(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, str) and (not v.strip() or v == UNKNOWN):
            return None
        return v

    @field_validator("base_reference", mode="before")
    @classmethod
    def parse_reference(cls, v: Any) -> Any:
        if isinstance(v, str) and (not v.strip() or v == UNKNOWN):
            return None
        return v

    @field_serializer("lessor", "address", "tenant")
    def emit_sentinel(self, v: str | None) -> str:
        return UNKNOWN if v is None else v

    @classmethod
    def unresolved(cls) -> ExtractionResult:
        """All fields unresolved, reference unset."""
        return cls()

    @property
    def is_complete(self) -> bool:
        """Lessor, address and tenant are all resolved."""
        return (
            self.lessor is not None
            and self.address is not None
            and self.tenant is not None
        )

    @property
    def is_groupable(self) -> bool:
        """Both hierarchy keys (lessor and address) are resolved."""
        return self.lessor is not None and self.address is not None


class ProcessedDocument(CamelModel):
    """A document with its classification and extraction for one batch run."""

    id: str
    filename: str
    classification: Classification
    extraction: ExtractionResult
    content: str


# === GROUPING MODELS ===


class LeaseFile(CamelModel):
    """Bundle of document ids for one lessor/address pair."""

    base_lease: str | None = None
    amendments: list[str] = Field(default_factory=list)
    commencements: list[str] = Field(default_factory=list)
    deliveries: list[str] = Field(default_factory=list)
    others: list[str] = Field(default_factory=list)

    def all_ids(self) -> list[str]:
        """Every document id in the bundle, base lease first."""
        ids = [self.base_lease] if self.base_lease else []
        return ids + self.amendments + self.commencements + self.deliveries + self.others


class AddressGroup(CamelModel):
    """Lease file plus the full documents filed under one address."""

    lease_file: LeaseFile = Field(default_factory=LeaseFile)
    documents: list[ProcessedDocument] = Field(default_factory=list)


class GroupingStats(CamelModel):
    """Aggregate counts, always recomputed from hierarchy contents."""

    total_documents: int = 0
    grouped_documents: int = 0
    ungrouped_documents: int = 0
    lessors: int = 0
    addresses: int = 0


# lessor -> address -> group. Dict order is key creation order.
GroupedOutput = dict[str, dict[str, AddressGroup]]


class GroupingResult(CamelModel):
    """Full output of one grouping run, persisted as the query snapshot."""

    grouped: GroupedOutput = Field(default_factory=dict)
    ungrouped: list[ProcessedDocument] = Field(default_factory=list)
    stats: GroupingStats = Field(default_factory=GroupingStats)


class SimplifiedOutput(CamelModel):
    """Content-free view of a GroupingResult."""

    hierarchy: dict[str, dict[str, LeaseFile]] = Field(default_factory=dict)
    ungrouped: list[str] = Field(default_factory=list)
    stats: GroupingStats = Field(default_factory=GroupingStats)


# === CHUNKING MODELS ===


class ChunkConfig(BaseModel):
    """Size limits for chunked processing of oversized documents."""

    max_chunk_size: int = Field(default=50_000, gt=0)
    size_threshold: int = Field(default=100_000, gt=0)
    overlap_size: int = Field(default=500, ge=0)
    max_extraction_chunks: int = Field(default=5, ge=1)

    @classmethod
    def from_settings(cls, settings: Settings) -> ChunkConfig:
        return cls(
            max_chunk_size=settings.chunk_max_size,
            size_threshold=settings.chunk_size_threshold,
            overlap_size=settings.chunk_overlap,
            max_extraction_chunks=settings.chunk_max_extraction_chunks,
        )


class ChunkingInfo(BaseModel):
    """Diagnostics on how a document was processed. Informational only."""

    was_chunked: bool
    total_chunks: int
    chunks_processed: int
    original_size: int
