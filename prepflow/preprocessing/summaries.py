"""Normalise dataset summaries coming from the upstream profiler."""

import logging
from typing import Any, Dict, Mapping, Optional

import pandas as pd
from pydantic import ValidationError

from .schemas import DatasetSummary

logger = logging.getLogger(__name__)

_DTYPE_KEYS = ("dtypes", "data_types")


def coerce_summary(raw: Any) -> Optional[DatasetSummary]:
    """
    Turn one provider payload into a DatasetSummary.

    Accepts a DatasetSummary, ``{"summary": {...}}`` or the bare summary dict,
    with the dtype mapping under ``dtypes`` or ``data_types``. Returns None
    when no usable ``columns`` list is present.
    """
    if isinstance(raw, DatasetSummary):
        return raw
    if not isinstance(raw, Mapping):
        return None

    body = raw.get("summary", raw)
    if not isinstance(body, Mapping):
        return None

    columns = body.get("columns")
    if not isinstance(columns, (list, tuple)):
        return None

    dtypes: Dict[str, Any] = {}
    for key in _DTYPE_KEYS:
        candidate = body.get(key)
        if isinstance(candidate, Mapping):
            dtypes = dict(candidate)
            break

    try:
        return DatasetSummary(columns=[str(c) for c in columns], dtypes=dtypes)
    except ValidationError as e:
        logger.warning(f"Discarding malformed dataset summary: {e}")
        return None


def has_dtype_mapping(raw: Any) -> bool:
    """True when the payload carries a per-column dtype mapping."""
    if isinstance(raw, DatasetSummary):
        return True
    if not isinstance(raw, Mapping):
        return False
    body = raw.get("summary", raw)
    if not isinstance(body, Mapping):
        return False
    return any(isinstance(body.get(key), Mapping) for key in _DTYPE_KEYS)


def summarize_frame(df: pd.DataFrame) -> DatasetSummary:
    """Build the summary the profiler would produce for a pandas DataFrame."""
    columns = [str(c) for c in df.columns]
    return DatasetSummary(
        columns=columns,
        dtypes={str(col): str(dtype) for col, dtype in df.dtypes.items()},
    )
