import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

from .classifier import classify_columns
from .exceptions import (
    OrchestrationError,
    PreprocessingException,
    SubmissionInProgressError,
)
from .orchestrator import BatchOrchestrator
from .schemas import ColumnClassification, SubmissionResult, Suggestions, UploadedDataset
from .state import PreprocessState

logger = logging.getLogger(__name__)


class PreprocessStep:
    """
    Operator-facing preprocessing workflow without any rendering.

    Owns the uploaded files, their summaries, the configuration state and
    the orchestrator, and keeps a single user-facing error message the way
    the wizard step displays it.
    """

    def __init__(
        self,
        orchestrator: BatchOrchestrator,
        files: Optional[Sequence[UploadedDataset]] = None,
        state: Optional[PreprocessState] = None,
    ):
        self.orchestrator = orchestrator
        self.files: List[UploadedDataset] = list(files or [])
        self.state = state or PreprocessState()
        self.summaries: Dict[str, Any] = {}
        self.classification = ColumnClassification.empty()

        self.error: Optional[str] = None
        self.progress = 0
        self.preprocessed_files: Dict[str, str] = {}
        self.active_step = "preprocess"

    @property
    def is_loading(self) -> bool:
        return self.orchestrator.is_busy

    @property
    def requires_target_column(self) -> bool:
        return self.state.requires_target_column

    def update_summaries(self, summaries: Optional[Mapping[str, Any]]) -> ColumnClassification:
        """Recompute column roles and reseed the scaling/encoding subsets."""
        self.summaries = dict(summaries or {})
        self.classification = classify_columns(self.summaries)
        if self.summaries:
            self.state.seed_column_subsets(self.classification)
        return self.classification

    def apply_suggestions(self, suggestions: Optional[Suggestions]) -> bool:
        return self.state.apply_suggestions(suggestions)

    def _set_progress(self, value: int) -> None:
        self.progress = value

    async def run(self) -> Optional[SubmissionResult]:
        """
        Validate and submit; on failure keep one message in ``error``.

        Returns the SubmissionResult on success, None otherwise.
        """
        self.error = None
        try:
            result = await self.orchestrator.submit(
                self.files,
                self.state.config,
                self.state.subset_modes,
                progress=self._set_progress,
            )
        except SubmissionInProgressError as e:
            self.error = e.message
            return None
        except OrchestrationError as e:
            self.error = f"Preprocessing failed: {e.message.rstrip('.')}."
            return None
        except PreprocessingException as e:
            self.error = e.message
            return None

        self.preprocessed_files = dict(result.files)
        self.active_step = "train"
        return result

    def download_urls(self) -> Dict[str, str]:
        """Download link for each returned artifact, keyed by dataset identifier."""
        return {
            dataset_id: self.orchestrator.client.download_url(reference)
            for dataset_id, reference in self.preprocessed_files.items()
        }
