"""FastAPI application exposing the receipt text parser.

Provides REST endpoints for parsing single and batched transcripts,
inspecting the pattern tables, and health checks.
"""

import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from receipt_text import __version__
from receipt_text.extraction.draft import draft_from_result
from receipt_text.extraction.parser import ReceiptTextParser
from receipt_text.extraction.patterns import rule_tables
from receipt_text.utils.config import AppConfig, load_config
from receipt_text.utils.logger import get_logger

from .schemas import (
    BatchItemResponse,
    BatchParseRequest,
    BatchParseResponse,
    HealthResponse,
    ParseRequest,
    ParseResponse,
    RulesResponse,
    RuleTableInfo,
)

logger = get_logger(__name__)

app = FastAPI(
    title="Receipt Text Parser API",
    description="Extract merchant, date and total from receipt OCR text",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_components() -> tuple[ReceiptTextParser, AppConfig]:
    """Load configuration and build the parser.

    Returns:
        Tuple of (parser, app_config).
    """
    config = load_config()
    return ReceiptTextParser(config.parser), config


def _parse_one(
    request: ParseRequest, parser: ReceiptTextParser, config: AppConfig
) -> ParseResponse:
    start_time = time.perf_counter()
    result, total = parser.parse_with_total(request.text)
    draft = draft_from_result(
        request.text,
        result,
        total,
        category=request.category,
        currency=request.currency,
        defaults=config.draft,
    )
    return ParseResponse(
        merchant_name=result.merchant_name,
        date=result.date,
        total_amount=result.total_amount,
        amount_value=result.amount_value,
        currency=draft.currency,
        category=draft.category.value,
        processing_time_ms=(time.perf_counter() - start_time) * 1000,
    )


@app.post("/parse", response_model=ParseResponse)
async def parse_transcript(request: ParseRequest) -> ParseResponse:
    """Parse one OCR transcript.

    Args:
        request: Transcript text with optional category and currency.

    Returns:
        Extracted fields with the resolved currency and category.
    """
    parser, config = _get_components()
    return _parse_one(request, parser, config)


@app.post("/parse/batch", response_model=BatchParseResponse)
async def parse_batch(request: BatchParseRequest) -> BatchParseResponse:
    """Parse several transcripts in one request.

    Args:
        request: Transcripts keyed by caller-supplied ids.

    Returns:
        One result per item, in request order.
    """
    parser, config = _get_components()
    results = [
        BatchItemResponse(
            id=item.id, result=_parse_one(ParseRequest(text=item.text), parser, config)
        )
        for item in request.items
    ]

    logger.info("Batch parsed %d transcripts", len(results))
    return BatchParseResponse(total_documents=len(results), results=results)


@app.get("/rules", response_model=RulesResponse)
async def list_rules() -> RulesResponse:
    """List the pattern tables in precedence order."""
    parser, _ = _get_components()
    tables = rule_tables()
    tables["store"] = [rule.name for rule in parser.store_rules]
    return RulesResponse(
        tables=[RuleTableInfo(family=k, rules=v) for k, v in tables.items()],
        label_keywords=list(parser.label_keywords),
    )


@app.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Check API health."""
    return HealthResponse(status="healthy", version=__version__)
