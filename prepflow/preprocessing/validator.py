from collections import Counter
from typing import Any, List, Optional, Sequence

from .exceptions import (
    DuplicateDatasetError,
    EmptyEncodingSubsetError,
    EmptyScalingSubsetError,
    MissingTargetColumnError,
    NoDatasetsError,
    PreprocessValidationError,
)
from .schemas import PreprocessConfig, SubsetModes


def _dataset_id(dataset: Any) -> str:
    # Uploaded handles carry a name; the /validate endpoint sends bare ids
    return getattr(dataset, "name", dataset)


def _duplicate_ids(datasets: Sequence[Any]) -> List[str]:
    counts = Counter(_dataset_id(d) for d in datasets)
    return [dataset_id for dataset_id, count in counts.items() if count > 1]


def check_submission(
    config: PreprocessConfig,
    datasets: Optional[Sequence[Any]],
    subset_modes: Optional[SubsetModes] = None,
) -> Optional[PreprocessValidationError]:
    """
    Return the first rule the configuration breaks, or None.

    Deeper checks (e.g. the target column existing in every dataset) belong
    to the execution service.
    """
    modes = subset_modes or SubsetModes()

    if not datasets:
        return NoDatasetsError()

    duplicates = _duplicate_ids(datasets)
    if duplicates:
        return DuplicateDatasetError(details={"duplicates": duplicates})

    if config.encoding_method.requires_target and not config.target_column:
        return MissingTargetColumnError(
            details={"encoding_method": config.encoding_method.value}
        )

    if config.scaling_enabled and modes.scaling and not config.scaling_columns:
        return EmptyScalingSubsetError()

    if modes.encoding and not config.encoding_columns:
        return EmptyEncodingSubsetError()

    return None


def validate_submission(
    config: PreprocessConfig,
    datasets: Optional[Sequence[Any]],
    subset_modes: Optional[SubsetModes] = None,
) -> None:
    """Raise the first PreprocessValidationError, if any."""
    error = check_submission(config, datasets, subset_modes)
    if error is not None:
        raise error
