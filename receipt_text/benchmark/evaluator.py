"""Accuracy benchmarking for receipt text parsing.

Compares parser output for a set of transcripts against labelled ground
truth and computes per-field precision, recall, F1 and accuracy.
"""

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path

from receipt_text.extraction.amounts import amount_to_float
from receipt_text.utils.logger import get_logger

logger = get_logger(__name__)

AMOUNT_FIELDS = frozenset({"total_amount"})


@dataclass
class FieldMetrics:
    """Precision, recall, F1, and accuracy metrics for a single field.

    Args:
        field_name: Name of the parsed field being measured.
    """

    field_name: str
    true_positives: int = 0
    false_positives: int = 0
    false_negatives: int = 0
    exact_matches: int = 0
    total: int = 0

    @property
    def precision(self) -> float:
        """Fraction of predicted values that are correct."""
        denom = self.true_positives + self.false_positives
        if denom == 0:
            return 0.0
        return self.true_positives / denom

    @property
    def recall(self) -> float:
        """Fraction of expected values that were correctly predicted."""
        denom = self.true_positives + self.false_negatives
        if denom == 0:
            return 0.0
        return self.true_positives / denom

    @property
    def f1(self) -> float:
        if self.precision + self.recall == 0:
            return 0.0
        return 2 * (self.precision * self.recall) / (self.precision + self.recall)

    @property
    def accuracy(self) -> float:
        """Fraction of exact (case- and whitespace-insensitive) matches."""
        if self.total == 0:
            return 0.0
        return self.exact_matches / self.total


@dataclass
class BenchmarkResult:
    """Aggregated benchmark results across all transcripts and fields."""

    total_documents: int
    successful_documents: int
    overall_accuracy: float
    overall_f1: float
    field_metrics: dict[str, FieldMetrics]
    avg_processing_time_ms: float = 0.0
    errors: list[str] = field(default_factory=list)


class Evaluator:
    """Evaluates parse results against ground truth labels.

    Amount fields match when their normalized values agree within
    ``fuzzy_threshold``, so ``"1.234,50"`` equals ``"1234.5"``.

    Args:
        fuzzy_threshold: Tolerance for numerical fuzzy matching.
    """

    def __init__(self, fuzzy_threshold: float = 0.01) -> None:
        self.fuzzy_threshold = fuzzy_threshold

    def evaluate(
        self,
        predictions: dict[str, dict[str, str | None]],
        ground_truth: dict[str, dict[str, str]],
        avg_processing_time_ms: float = 0.0,
    ) -> BenchmarkResult:
        """Compare predictions against ground truth and compute metrics.

        Args:
            predictions: Mapping of transcript name to parsed field values.
            ground_truth: Mapping of transcript name to expected field values.
            avg_processing_time_ms: Mean parse time, carried into the result.

        Returns:
            Aggregated benchmark results with per-field metrics.
        """
        field_metrics: dict[str, FieldMetrics] = {}
        errors: list[str] = []
        missing_count = 0

        for name, expected in ground_truth.items():
            predicted = predictions.get(name)
            if predicted is None:
                errors.append(f"Missing prediction for {name}")
                missing_count += 1

            for field_name, expected_value in expected.items():
                metrics = field_metrics.setdefault(field_name, FieldMetrics(field_name))
                metrics.total += 1

                value = predicted.get(field_name) if predicted else None
                if value is None or not str(value).strip():
                    metrics.false_negatives += 1
                    continue

                pred_value = str(value).strip().lower()
                exp_value = str(expected_value).strip().lower()
                if pred_value == exp_value:
                    metrics.true_positives += 1
                    metrics.exact_matches += 1
                elif self._fuzzy_match(field_name, pred_value, exp_value):
                    metrics.true_positives += 1
                else:
                    metrics.false_positives += 1

        all_f1 = [m.f1 for m in field_metrics.values() if m.total > 0]
        all_acc = [m.accuracy for m in field_metrics.values() if m.total > 0]

        logger.info(
            "Evaluated %d transcripts across %d fields",
            len(ground_truth),
            len(field_metrics),
        )
        return BenchmarkResult(
            total_documents=len(ground_truth),
            successful_documents=len(ground_truth) - missing_count,
            overall_accuracy=sum(all_acc) / len(all_acc) if all_acc else 0.0,
            overall_f1=sum(all_f1) / len(all_f1) if all_f1 else 0.0,
            field_metrics=field_metrics,
            avg_processing_time_ms=avg_processing_time_ms,
            errors=errors,
        )

    def _fuzzy_match(self, field_name: str, pred: str, expected: str) -> bool:
        """Check whether two values match after normalization.

        Amounts are compared numerically; other fields ignore internal
        whitespace differences.
        """
        if field_name in AMOUNT_FIELDS:
            pred_num = amount_to_float(pred)
            exp_num = amount_to_float(expected)
            if pred_num is None or exp_num is None:
                return False
            return abs(pred_num - exp_num) < self.fuzzy_threshold

        return " ".join(pred.split()) == " ".join(expected.split())

    def generate_report(
        self, result: BenchmarkResult, output_path: Path | None = None
    ) -> str:
        """Generate a human-readable benchmark report.

        Args:
            result: Benchmark results to format.
            output_path: Optional path to write the report file.

        Returns:
            Formatted report string.
        """
        lines = [
            "=" * 60,
            "RECEIPT PARSER BENCHMARK",
            "=" * 60,
            f"Total Transcripts:    {result.total_documents}",
            f"Parsed:               {result.successful_documents}",
            f"Overall Accuracy:     {result.overall_accuracy:.2%}",
            f"Overall F1 Score:     {result.overall_f1:.3f}",
            f"Avg Parse Time:       {result.avg_processing_time_ms:.2f}ms",
            "",
            "Field-Level Metrics:",
            "-" * 60,
            f"{'Field':<20} {'Precision':>10} {'Recall':>10} {'F1':>10} {'Accuracy':>10}",
            "-" * 60,
        ]

        for name, metrics in sorted(result.field_metrics.items()):
            lines.append(
                f"{name:<20} {metrics.precision:>10.2%} {metrics.recall:>10.2%} "
                f"{metrics.f1:>10.3f} {metrics.accuracy:>10.2%}"
            )
        lines.append("=" * 60)

        if result.errors:
            lines.append("")
            lines.append("Errors:")
            for error in result.errors:
                lines.append(f"  - {error}")

        report = "\n".join(lines)

        if output_path:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(report, encoding="utf-8")
            logger.info("Report written to %s", output_path)

        return report


def load_ground_truth(path: Path) -> dict[str, dict[str, str]]:
    """Load ground truth labels from a JSON or CSV file.

    JSON format: ``{"transcript.txt": {"field": "value", ...}, ...}``
    CSV format: rows with a ``filename`` column and field value columns;
    empty cells are treated as unlabelled.

    Args:
        path: Path to the ground truth file.

    Returns:
        Mapping of transcript name to field-value pairs.

    Raises:
        ValueError: If the file format is not supported.
    """
    if path.suffix == ".json":
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    if path.suffix == ".csv":
        gt: dict[str, dict[str, str]] = {}
        with open(path, newline="", encoding="utf-8") as f:
            for row in csv.DictReader(f):
                filename = row.pop("filename")
                gt[filename] = {k: v for k, v in row.items() if v}
        return gt

    raise ValueError(f"Unsupported ground truth format: {path.suffix}")
