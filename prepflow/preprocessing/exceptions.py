from typing import Any, Dict, Optional


class PreprocessingException(Exception):
    """Base exception for preprocessing step errors."""

    default_message = "Preprocessing error"
    status_code = 500

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class PreprocessValidationError(PreprocessingException):
    """Local pre-flight check failed; fixed by editing the configuration."""

    default_message = "Invalid preprocessing configuration"
    status_code = 400


class NoDatasetsError(PreprocessValidationError):
    default_message = "Please upload files first."


class DuplicateDatasetError(PreprocessValidationError):
    default_message = "Each uploaded file must have a unique name."


class MissingTargetColumnError(PreprocessValidationError):
    default_message = "Please select a target column for target encoding."


class EmptyScalingSubsetError(PreprocessValidationError):
    default_message = "Please select at least one column for scaling or disable scaling."


class EmptyEncodingSubsetError(PreprocessValidationError):
    default_message = "Please select at least one column for encoding."


class OrchestrationError(PreprocessingException):
    """The batch submission failed as a whole; retry by resubmitting."""

    default_message = "Preprocessing submission failed"
    status_code = 502


class SubmissionInProgressError(OrchestrationError):
    default_message = "A preprocessing submission is already in progress."
    status_code = 409
