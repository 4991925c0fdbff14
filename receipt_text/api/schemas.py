"""Pydantic request/response schemas for the FastAPI endpoints."""

from pydantic import BaseModel, Field


class ParseRequest(BaseModel):
    """Request body carrying one OCR transcript."""

    text: str
    category: str | None = None
    currency: str | None = None


class ParseResponse(BaseModel):
    """Parsed fields of one transcript plus the resolved draft values."""

    merchant_name: str | None = None
    date: str | None = None
    total_amount: str | None = None
    amount_value: float | None = None
    currency: str
    category: str
    processing_time_ms: float


class BatchItem(BaseModel):
    """A single transcript in a batch request."""

    id: str
    text: str


class BatchParseRequest(BaseModel):
    """Request body for parsing several transcripts at once."""

    items: list[BatchItem] = Field(default_factory=list)


class BatchItemResponse(BaseModel):
    """Response schema for a single item in a batch."""

    id: str
    result: ParseResponse


class BatchParseResponse(BaseModel):
    """Response schema for batch parsing."""

    total_documents: int
    results: list[BatchItemResponse]


class RuleTableInfo(BaseModel):
    """Names of the rules in one pattern family, in precedence order."""

    family: str
    rules: list[str]


class RulesResponse(BaseModel):
    """Response schema listing the parser's pattern tables."""

    tables: list[RuleTableInfo]
    label_keywords: list[str]


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str
