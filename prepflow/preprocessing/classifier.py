"""
Column role inference from per-dataset dtype tags.

Dataset summaries are produced upstream and arrive loosely typed; anything
malformed is treated as a classification gap. An unexpected structural error
degrades to an empty classification instead of propagating.
"""

import logging
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Tuple

from .schemas import ColumnClassification, DatasetSummary
from .summaries import coerce_summary, has_dtype_mapping

logger = logging.getLogger(__name__)

NUMERIC_TAGS = frozenset({"int64", "float64", "int", "float"})
NUMERIC_MARKERS = ("int", "float")
CATEGORICAL_TAGS = frozenset({"object", "category"})
CATEGORICAL_MARKERS = ("str", "O")


def is_numeric_tag(tag: Optional[str]) -> bool:
    if tag is None:
        return False
    tag = str(tag)
    return tag in NUMERIC_TAGS or any(marker in tag for marker in NUMERIC_MARKERS)


def is_categorical_tag(tag: Optional[str]) -> bool:
    if tag is None:
        return False
    tag = str(tag)
    return tag in CATEGORICAL_TAGS or any(
        marker in tag for marker in CATEGORICAL_MARKERS
    )


def _ordered_unique(values: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _iter_summaries(
    summaries: Mapping[str, Any],
) -> Iterator[Tuple[DatasetSummary, bool]]:
    """Yield (summary, has_dtypes) for every payload with a usable column list."""
    for dataset_id, raw in summaries.items():
        summary = coerce_summary(raw)
        if summary is None:
            logger.debug(f"Skipping summary for {dataset_id!r}: no column list")
            continue
        yield summary, has_dtype_mapping(raw)


def classify_columns(summaries: Optional[Mapping[str, Any]]) -> ColumnClassification:
    """
    Derive the column universe and numeric/categorical partitions.

    Args:
        summaries: dataset identifier -> summary payload

    Returns:
        ColumnClassification; empty when input is missing or malformed.
    """
    if not summaries:
        return ColumnClassification.empty()

    try:
        available: List[str] = []
        numeric: List[str] = []
        categorical: List[str] = []

        for summary, has_dtypes in _iter_summaries(summaries):
            available.extend(summary.columns)
            if not has_dtypes:
                continue
            for column in summary.columns:
                tag = summary.dtypes.get(column)
                if is_numeric_tag(tag):
                    numeric.append(column)
                if is_categorical_tag(tag):
                    categorical.append(column)

        return ColumnClassification(
            available_columns=_ordered_unique(available),
            numeric_columns=_ordered_unique(numeric),
            categorical_columns=_ordered_unique(categorical),
        )
    except Exception as e:
        logger.error(f"Error processing column data: {e}", exc_info=True)
        return ColumnClassification.empty()


def _column_matches(column: str, summaries: Optional[Mapping[str, Any]], rule) -> bool:
    if not summaries:
        return False
    try:
        return any(
            has_dtypes
            and column in summary.columns
            and rule(summary.dtypes.get(column))
            for summary, has_dtypes in _iter_summaries(summaries)
        )
    except Exception as e:
        logger.error(f"Error checking column {column!r}: {e}", exc_info=True)
        return False


def is_numeric_column(column: str, summaries: Optional[Mapping[str, Any]]) -> bool:
    """True when any dataset tags ``column`` as numeric."""
    return _column_matches(column, summaries, is_numeric_tag)


def is_categorical_column(
    column: str, summaries: Optional[Mapping[str, Any]]
) -> bool:
    """True when any dataset tags ``column`` as categorical."""
    return _column_matches(column, summaries, is_categorical_tag)
