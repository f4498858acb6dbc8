"""
Batch submission of a validated preprocessing configuration.

The whole dataset set goes to the execution service as one logical call:
callers get either a complete SubmissionResult or a single
OrchestrationError, never a partial mapping.
"""

import logging
from typing import Any, Callable, Optional, Sequence

import httpx

from prepflow.utils.logging_utils import log_preprocess_action

from .client import PreprocessServiceClient
from .exceptions import OrchestrationError, SubmissionInProgressError
from .schemas import (
    PreprocessConfig,
    PreprocessRequest,
    SubmissionResult,
    SubsetModes,
    UploadedDataset,
)
from .validator import validate_submission

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]

PROGRESS_VALIDATED = 10
PROGRESS_REQUEST_BUILT = 30
PROGRESS_RESPONDED = 90
PROGRESS_DONE = 100


class ProgressTracker:
    """Forward percentages to a sink, dropping any that would go backwards."""

    def __init__(self, sink: Optional[ProgressCallback] = None):
        self.sink = sink
        self.current = 0

    def report(self, value: float) -> None:
        percent = max(0, min(100, int(value)))
        if percent < self.current:
            return
        self.current = percent
        if self.sink:
            self.sink(percent)

    def span(self, start: int, end: int) -> Callable[[float], None]:
        """Map a 0..1 fraction into the ``start``..``end`` range."""
        return lambda fraction: self.report(start + (end - start) * fraction)


def build_request(
    config: PreprocessConfig, subset_modes: Optional[SubsetModes] = None
) -> PreprocessRequest:
    """Translate the configuration into the execution service's form fields."""
    modes = subset_modes or SubsetModes()
    return PreprocessRequest(
        missing_strategy=config.missing_strategy,
        scaling=config.scaling_enabled,
        scaling_columns=",".join(config.scaling_columns) if modes.scaling else None,
        encoding=config.encoding_method,
        encoding_columns=",".join(config.encoding_columns) if modes.encoding else None,
        # Sent for every encoding, not only the target-based ones
        target_column=config.target_column,
    )


def error_detail(exc: BaseException) -> str:
    """Best human-readable message: service-provided text over transport text."""
    if isinstance(exc, httpx.HTTPStatusError):
        message = _service_message(exc.response)
        if message:
            return message
    text = str(exc)
    return text or exc.__class__.__name__


def _service_message(response: httpx.Response) -> Optional[str]:
    try:
        payload: Any = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    for key in ("error", "detail", "message"):
        value = payload.get(key)
        if isinstance(value, dict):
            value = value.get("message") or value.get("error")
        if isinstance(value, str) and value:
            return value
    return None


class BatchOrchestrator:
    """Validates, submits and maps one preprocessing batch at a time."""

    def __init__(self, client: PreprocessServiceClient):
        self.client = client
        self._busy = False

    @property
    def is_busy(self) -> bool:
        return self._busy

    async def submit(
        self,
        datasets: Sequence[UploadedDataset],
        config: PreprocessConfig,
        subset_modes: Optional[SubsetModes] = None,
        progress: Optional[ProgressCallback] = None,
    ) -> SubmissionResult:
        """
        Run one batch submission.

        Args:
            datasets: raw dataset handles; their names are the dataset identifiers
            config: operator configuration
            subset_modes: which column subsets are active
            progress: receives non-decreasing percentages; 100 only on success

        Returns:
            SubmissionResult keyed by exactly the input dataset identifiers.

        Raises:
            PreprocessValidationError: pre-flight check failed
            SubmissionInProgressError: another submission is outstanding
            OrchestrationError: the service call failed as a whole
        """
        if self._busy:
            raise SubmissionInProgressError()

        validate_submission(config, datasets, subset_modes)

        tracker = ProgressTracker(progress)
        dataset_ids = [d.name for d in datasets]
        self._busy = True
        try:
            tracker.report(PROGRESS_VALIDATED)
            request = build_request(config, subset_modes)
            tracker.report(PROGRESS_REQUEST_BUILT)

            try:
                artifacts = await self.client.preprocess(
                    datasets,
                    request,
                    on_upload_progress=tracker.span(
                        PROGRESS_REQUEST_BUILT, PROGRESS_RESPONDED
                    ),
                )
            except (httpx.HTTPError, ValueError) as e:
                detail = error_detail(e)
                logger.error(f"Preprocessing batch failed: {detail}")
                log_preprocess_action("preprocess_batch", success=False, details=detail)
                raise OrchestrationError(
                    detail,
                    details={"datasets": dataset_ids, "type": e.__class__.__name__},
                ) from e
            tracker.report(PROGRESS_RESPONDED)

            if set(artifacts) != set(dataset_ids):
                missing = sorted(set(dataset_ids) - set(artifacts))
                extra = sorted(set(artifacts) - set(dataset_ids))
                log_preprocess_action(
                    "preprocess_batch",
                    success=False,
                    details=f"missing={missing} extra={extra}",
                )
                raise OrchestrationError(
                    "Preprocessing service returned results that do not match the submitted datasets",
                    details={"missing": missing, "extra": extra},
                )

            result = SubmissionResult(files={d: artifacts[d] for d in dataset_ids})
            tracker.report(PROGRESS_DONE)
            log_preprocess_action(
                "preprocess_batch", details=f"{len(dataset_ids)} dataset(s)"
            )
            return result
        finally:
            self._busy = False
