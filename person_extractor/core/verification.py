# person_extractor/core/verification.py
"""Compare extraction output against hand-checked expected records."""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from person_extractor.core.extractor import ExtractionEngine
from person_extractor.utils.logger import logger


@dataclass
class ComparisonResult:
    success: bool
    differences: List[str] = field(default_factory=list)


@dataclass
class VerificationResult:
    success: bool
    differences: List[str] = field(default_factory=list)
    error: Optional[str] = None
    actual: Optional[List[Any]] = None


def _compare(actual: Any, expected: Any, path: str, differences: List[str]) -> None:
    if isinstance(expected, dict):
        if not isinstance(actual, dict):
            differences.append(f"Field '{path}' should be an object, got {actual!r}")
            return
        for key, value in expected.items():
            child = f"{path}.{key}" if path else str(key)
            if key not in actual:
                differences.append(f"Expected field '{child}' is missing in the actual data")
            else:
                _compare(actual[key], value, child, differences)

    elif isinstance(expected, list):
        if not isinstance(actual, list):
            differences.append(f"Field '{path}' should be a list, got {actual!r}")
            return
        if len(actual) != len(expected):
            differences.append(f"Field '{path}' length mismatch: expected {len(expected)}, got {len(actual)}")
        for i, (got, want) in enumerate(zip(actual, expected)):
            _compare(got, want, f"{path}[{i}]", differences)

    elif actual != expected:
        differences.append(f"Field '{path}' value mismatch: expected '{expected}', got '{actual}'")


def compare_person_records(actual: Any, expected: Any) -> ComparisonResult:
    """
    Deep comparison of extracted data with expected data.

    Every key present in `expected` must exist in `actual` with an equal value;
    extra keys in `actual` are ignored.
    """
    differences: List[str] = []
    _compare(actual, expected, "", differences)
    return ComparisonResult(success=not differences, differences=differences)


async def verify_extraction(
    engine: ExtractionEngine,
    document_text: str,
    expected: Any,
    **extract_kwargs,
) -> VerificationResult:
    """Run an extraction and compare the records with `expected`."""
    result = await engine.extract(document_text, **extract_kwargs)
    if not result.success:
        return VerificationResult(success=False, error=f"Extraction failed: {result.error}", actual=result.data)

    comparison = compare_person_records(result.data, expected)
    if comparison.success:
        logger.info("Verification passed")
    else:
        logger.warning(f"Verification failed with {len(comparison.differences)} difference(s)")
        for diff in comparison.differences:
            logger.warning(f"  - {diff}")

    return VerificationResult(
        success=comparison.success,
        differences=comparison.differences,
        actual=result.data,
    )
