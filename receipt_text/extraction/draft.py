"""Receipt drafts: parse results prepared for a persistence layer."""

from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field

from receipt_text.utils.config import DraftConfig

from .amounts import CURRENCY_CODES, detect_currency
from .parser import AmountCandidate, ParseResult, ReceiptTextParser


class ReceiptCategory(StrEnum):
    """Spending categories a receipt can be filed under."""

    GROCERIES = "Groceries"
    DINING = "Dining"
    SHOPPING = "Shopping"
    TRANSPORTATION = "Transportation"
    HEALTHCARE = "Healthcare"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    OTHER = "Other"

    @classmethod
    def from_string(cls, value: str | None) -> "ReceiptCategory":
        """Look up a category by display name, ignoring case; unknown is OTHER."""
        if value:
            for category in cls:
                if category.value.lower() == value.strip().lower():
                    return category
        return cls.OTHER


class ReceiptDraft(BaseModel):
    """A parsed receipt awaiting user confirmation and storage."""

    merchant_name: str | None = None
    date: str | None = None
    total_amount: float | None = None
    currency: str = "MAD"
    category: ReceiptCategory = ReceiptCategory.OTHER
    raw_text: str = ""
    captured_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def build_draft(
    text: str,
    parser: ReceiptTextParser | None = None,
    category: str | None = None,
    currency: str | None = None,
    captured_at: datetime | None = None,
    defaults: DraftConfig | None = None,
) -> ReceiptDraft:
    """Parse a transcript and fill in the fields a stored receipt needs.

    The currency comes from, in order: the ``currency`` argument, the
    marker next to the total, the first marker anywhere in the text,
    and finally the configured default.

    Args:
        text: Raw OCR transcript.
        parser: Parser to use; a default-configured one when omitted.
        category: Category display name chosen by the user.
        currency: Explicit currency code overriding detection.
        captured_at: Capture time; now (UTC) when omitted.
        defaults: Default currency and category.

    Returns:
        Draft with the numeric amount and resolved currency and category.
    """
    parser = parser or ReceiptTextParser()
    text = text if isinstance(text, str) else ""
    result, total = parser.parse_with_total(text)
    return draft_from_result(
        text,
        result,
        total,
        category=category,
        currency=currency,
        captured_at=captured_at,
        defaults=defaults,
    )


def draft_from_result(
    text: str,
    result: ParseResult,
    total: AmountCandidate | None = None,
    category: str | None = None,
    currency: str | None = None,
    captured_at: datetime | None = None,
    defaults: DraftConfig | None = None,
) -> ReceiptDraft:
    """Build a draft from an existing parse of ``text`` without re-parsing it."""
    defaults = defaults or DraftConfig()
    detected = None
    if total is not None and total.currency:
        detected = CURRENCY_CODES.get(total.currency.lower())
    resolved_currency = (
        currency or detected or detect_currency(text) or defaults.default_currency
    )

    extra = {"captured_at": captured_at} if captured_at is not None else {}
    return ReceiptDraft(
        merchant_name=result.merchant_name,
        date=result.date,
        total_amount=result.amount_value,
        currency=resolved_currency.upper(),
        category=ReceiptCategory.from_string(category or defaults.default_category),
        raw_text=text,
        **extra,
    )

