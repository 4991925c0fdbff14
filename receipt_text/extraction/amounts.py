"""Amount normalization and currency detection shared by the parser and its callers."""

import re

from .patterns import CURRENCY_RULE

_SEPARATORS = ".,"
_KEEP = re.compile(r"[^\d.,]")

CURRENCY_CODES: dict[str, str] = {
    "mad": "MAD",
    "dh": "MAD",
    "dhs": "MAD",
    "eur": "EUR",
    "€": "EUR",
    "usd": "USD",
    "$": "USD",
    "gbp": "GBP",
    "£": "GBP",
}


def normalize_amount(raw: str | None) -> str | None:
    """Convert an amount substring to a canonical dot-decimal string.

    The last separator is the decimal point when exactly two digits follow
    it; every other separator is digit grouping and is dropped.

    Args:
        raw: Amount text as matched, e.g. ``"1.234,56"`` or ``"45,00 DH"``.

    Returns:
        Canonical form such as ``"1234.56"``, or ``None`` if no digits remain.
    """
    if not raw:
        return None

    cleaned = _KEEP.sub("", raw).strip(_SEPARATORS)
    if not any(ch.isdigit() for ch in cleaned):
        return None

    last_sep = max(cleaned.rfind(sep) for sep in _SEPARATORS)
    if last_sep != -1 and len(cleaned) - last_sep - 1 == 2:
        integer = re.sub(r"[.,]", "", cleaned[:last_sep]) or "0"
        return f"{integer}.{cleaned[last_sep + 1:]}"

    return re.sub(r"[.,]", "", cleaned)


def amount_to_float(raw: str | None) -> float | None:
    """Parse an amount substring to a float, or ``None`` if it does not parse."""
    normalized = normalize_amount(raw)
    if normalized is None:
        return None
    try:
        return float(normalized)
    except ValueError:
        return None


def detect_currency(text: str | None) -> str | None:
    """Return the ISO code of the first currency marker in ``text``.

    ``DH``/``DHS``/``MAD`` map to ``"MAD"``; symbols map to their usual codes.
    """
    if not text:
        return None
    match = CURRENCY_RULE.search(text)
    if match is None:
        return None
    return CURRENCY_CODES.get(match.group(0).lower())
