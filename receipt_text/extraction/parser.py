"""Heuristic extraction of merchant, date and total from receipt OCR text.

The parser is a pure function of its input and configuration: it keeps no
state between calls, performs no I/O and never raises for any string
input. A field that cannot be found is returned as ``None``.
"""

from dataclasses import asdict, dataclass

from receipt_text.utils.config import ParserConfig

from .amounts import amount_to_float
from .patterns import (
    ADDRESS_RULES,
    AMOUNT_SHAPE_RULE,
    BOILERPLATE_KEYWORDS,
    CONTACT_RULES,
    DATE_RULES,
    DECIMAL_AMOUNT_RULE,
    LINE_AMOUNT_RULES,
    READABLE_RULE,
    STORE_RULES,
    PatternRule,
    merchant_rule,
)


@dataclass(frozen=True)
class ParseResult:
    """Fields extracted from one receipt transcript.

    Values are the substrings as they appear in the text; the merchant
    name from the allowlist is uppercased.
    """

    merchant_name: str | None = None
    date: str | None = None
    total_amount: str | None = None

    @property
    def amount_value(self) -> float | None:
        """The total amount as a number, or ``None``."""
        return amount_to_float(self.total_amount)

    def to_dict(self) -> dict[str, str | None]:
        return asdict(self)


@dataclass(frozen=True)
class AmountCandidate:
    """An amount matched in the text together with how it was found."""

    text: str
    value: float
    rule_name: str
    line_index: int | None = None
    currency: str | None = None


def split_lines(text: str) -> list[str]:
    """Split a transcript into trimmed, non-empty lines, top to bottom."""
    return [line.strip() for line in text.splitlines() if line.strip()]


class ReceiptTextParser:
    """Extracts merchant name, date and total amount from OCR text.

    Merchant and date use first-match-wins over ordered rule tables.
    The total prefers amounts on lines carrying a label keyword and falls
    back to the largest amount in the text.

    Args:
        config: Parser thresholds; defaults are used when omitted.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config or ParserConfig()
        extra = tuple(
            merchant_rule(name) for name in self.config.extra_merchants if name.strip()
        )
        self.store_rules: tuple[PatternRule, ...] = STORE_RULES + extra
        self.label_keywords: tuple[str, ...] = tuple(
            keyword.lower() for keyword in self.config.label_keywords if keyword.strip()
        )

    def parse(self, text: str) -> ParseResult:
        """Extract all three fields from a transcript.

        Args:
            text: Raw OCR text, lines separated by newlines.

        Returns:
            Parse result; every field is ``None`` for empty input.
        """
        return self.parse_with_total(text)[0]

    def parse_with_total(
        self, text: str
    ) -> tuple[ParseResult, AmountCandidate | None]:
        """Extract all three fields and keep the winning amount candidate.

        The candidate carries the currency marker found next to the total,
        so callers building drafts do not need a second pass over the text.
        """
        if not isinstance(text, str) or not text.strip():
            return ParseResult(), None

        lines = split_lines(text)
        total = self.find_total_amount(text, lines)
        result = ParseResult(
            merchant_name=self.extract_merchant_name(text, lines),
            date=self.extract_date(text),
            total_amount=total.text if total else None,
        )
        return result, total

    def extract_merchant_name(
        self, text: str, lines: list[str] | None = None
    ) -> str | None:
        """Find the merchant name.

        Known store names anywhere in the text win. Otherwise the first
        of the leading lines that survives the exclusion rules is used,
        then the very first line, unless it is unreadable or a contact line.
        """
        for rule in self.store_rules:
            match = rule.search(text)
            if match:
                return match.group(0).upper()

        if lines is None:
            lines = split_lines(text)

        limit = self.config.merchant_max_length
        for line in lines[: self.config.candidate_line_limit]:
            if self._is_merchant_candidate(line):
                return line[:limit]

        if lines and READABLE_RULE.search(lines[0]) and not _is_contact(lines[0]):
            return lines[0][:limit]
        return None

    def extract_date(self, text: str) -> str | None:
        """Return the first match of the highest-precedence date rule."""
        for rule in DATE_RULES:
            match = rule.search(text)
            if match:
                return match.group(0)
        return None

    def extract_total_amount(self, text: str) -> str | None:
        total = self.find_total_amount(text)
        return total.text if total else None

    def find_total_amount(
        self, text: str, lines: list[str] | None = None
    ) -> AmountCandidate | None:
        """Locate the total amount and report how it was found.

        Args:
            text: Full transcript.
            lines: Pre-split lines of ``text``, if already available.

        Returns:
            The winning candidate, or ``None`` if no plausible amount exists.
        """
        if lines is None:
            lines = split_lines(text)

        labeled = self.labeled_amounts(lines)
        if labeled:
            if self.config.labeled_amount_policy == "first":
                return labeled[0]
            return labeled[-1]

        return self.largest_amount(text)

    def labeled_amounts(self, lines: list[str]) -> list[AmountCandidate]:
        """Collect one amount per line that carries a label keyword."""
        candidates: list[AmountCandidate] = []
        for index, line in enumerate(lines):
            lowered = line.lower()
            if not any(keyword in lowered for keyword in self.label_keywords):
                continue
            candidate = self._first_line_amount(line, index)
            if candidate is not None:
                candidates.append(candidate)
        return candidates

    def largest_amount(self, text: str) -> AmountCandidate | None:
        """Return the numerically largest decimal amount in the text.

        Ties keep the earliest occurrence. Substrings that do not parse
        are skipped.
        """
        best: AmountCandidate | None = None
        for match in DECIMAL_AMOUNT_RULE.pattern.finditer(text):
            raw = match.group("amount")
            value = amount_to_float(raw)
            if value is None or not self._is_plausible(value):
                continue
            if best is None or value > best.value:
                best = AmountCandidate(
                    text=raw, value=value, rule_name=DECIMAL_AMOUNT_RULE.name
                )
        return best

    def _first_line_amount(self, line: str, index: int) -> AmountCandidate | None:
        for rule in LINE_AMOUNT_RULES:
            for match in rule.pattern.finditer(line):
                raw = match.group("amount")
                value = amount_to_float(raw)
                if value is None or not self._is_plausible(value):
                    continue
                return AmountCandidate(
                    text=raw,
                    value=value,
                    rule_name=rule.name,
                    line_index=index,
                    currency=match.groupdict().get("currency"),
                )
        return None

    def _is_plausible(self, value: float) -> bool:
        if not self.config.enforce_amount_bounds:
            return True
        return self.config.min_amount <= value <= self.config.max_amount

    def _is_merchant_candidate(self, line: str) -> bool:
        cfg = self.config
        if not READABLE_RULE.search(line):
            return False
        if len(line) < cfg.min_line_length or len(line) > cfg.max_line_length:
            return False
        if any(rule.search(line) for rule in DATE_RULES):
            return False
        if AMOUNT_SHAPE_RULE.search(line) or _is_contact(line):
            return False

        if cfg.strict_merchant_filters:
            if any(rule.search(line) for rule in ADDRESS_RULES):
                return False
            lowered = line.lower()
            if any(keyword in lowered for keyword in BOILERPLATE_KEYWORDS):
                return False
            # mostly digits: order numbers, register ids
            if sum(ch.isdigit() for ch in line) > len(line) / 2:
                return False
        return True


def _is_contact(line: str) -> bool:
    return any(rule.search(line) for rule in CONTACT_RULES)


_default_parser = ReceiptTextParser()


def parse(text: str) -> ParseResult:
    """Parse ``text`` with the default configuration."""
    return _default_parser.parse(text)
