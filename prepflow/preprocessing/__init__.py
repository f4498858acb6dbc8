"""Preprocessing configuration and batch orchestration."""

from .classifier import classify_columns, is_categorical_column, is_numeric_column
from .client import PreprocessServiceClient
from .exceptions import (
    DuplicateDatasetError,
    EmptyEncodingSubsetError,
    EmptyScalingSubsetError,
    MissingTargetColumnError,
    NoDatasetsError,
    OrchestrationError,
    PreprocessingException,
    PreprocessValidationError,
    SubmissionInProgressError,
)
from .orchestrator import BatchOrchestrator, ProgressTracker, build_request
from .schemas import (
    ColumnClassification,
    DatasetSummary,
    EncodingMethod,
    MissingStrategy,
    PreprocessConfig,
    PreprocessRequest,
    SubmissionResult,
    SubsetModes,
    Suggestions,
    UploadedDataset,
)
from .state import PreprocessState
from .step import PreprocessStep
from .summaries import coerce_summary, summarize_frame
from .validator import check_submission, validate_submission

__all__ = [
    "BatchOrchestrator",
    "ColumnClassification",
    "DatasetSummary",
    "DuplicateDatasetError",
    "EmptyEncodingSubsetError",
    "EmptyScalingSubsetError",
    "EncodingMethod",
    "MissingStrategy",
    "MissingTargetColumnError",
    "NoDatasetsError",
    "OrchestrationError",
    "PreprocessConfig",
    "PreprocessRequest",
    "PreprocessServiceClient",
    "PreprocessState",
    "PreprocessStep",
    "PreprocessValidationError",
    "PreprocessingException",
    "ProgressTracker",
    "SubmissionInProgressError",
    "SubmissionResult",
    "SubsetModes",
    "Suggestions",
    "UploadedDataset",
    "build_request",
    "check_submission",
    "classify_columns",
    "coerce_summary",
    "is_categorical_column",
    "is_numeric_column",
    "summarize_frame",
    "validate_submission",
]
