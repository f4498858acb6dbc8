import logging
from typing import Iterable, List, Optional, Union

from .schemas import (
    ColumnClassification,
    EncodingMethod,
    MissingStrategy,
    PreprocessConfig,
    SubsetModes,
    Suggestions,
)

logger = logging.getLogger(__name__)


def _toggle(columns: List[str], column: str) -> List[str]:
    if column in columns:
        return [c for c in columns if c != column]
    return [*columns, column]


class PreprocessState:
    """
    Single-writer holder of the operator's preprocessing selections.

    Mutators never validate the combination of options; that is left to
    ``validate_submission``. Switching a subset mode off keeps the subset so
    it comes back when the mode is re-enabled.
    """

    def __init__(
        self,
        config: Optional[PreprocessConfig] = None,
        subset_modes: Optional[SubsetModes] = None,
    ):
        self.config = config or PreprocessConfig()
        self.subset_modes = subset_modes or SubsetModes()
        # Watched values: was each suggestion input non-empty last time we looked
        self._strategy_seen = False
        self._target_seen = False

    # --- missing values -------------------------------------------------

    def set_missing_strategy(self, strategy: Union[str, MissingStrategy]) -> None:
        self.config.missing_strategy = MissingStrategy(strategy)

    # --- scaling --------------------------------------------------------

    def set_scaling(self, enabled: bool) -> None:
        self.config.scaling_enabled = bool(enabled)

    def toggle_scaling_subset_mode(self) -> bool:
        self.subset_modes.scaling = not self.subset_modes.scaling
        return self.subset_modes.scaling

    def set_scaling_columns(self, columns: Iterable[str]) -> None:
        self.config.scaling_columns = list(columns)

    def toggle_scaling_column(self, column: str) -> None:
        self.config.scaling_columns = _toggle(self.config.scaling_columns, column)

    def select_all_numeric(self, classification: ColumnClassification) -> None:
        self.config.scaling_columns = [
            c for c in classification.available_columns if classification.is_numeric(c)
        ]

    def clear_scaling_columns(self) -> None:
        self.config.scaling_columns = []

    # --- encoding -------------------------------------------------------

    def set_encoding(self, method: Union[str, EncodingMethod]) -> None:
        self.config.encoding_method = EncodingMethod(method)

    def toggle_encoding_subset_mode(self) -> bool:
        self.subset_modes.encoding = not self.subset_modes.encoding
        return self.subset_modes.encoding

    def set_encoding_columns(self, columns: Iterable[str]) -> None:
        self.config.encoding_columns = list(columns)

    def toggle_encoding_column(self, column: str) -> None:
        self.config.encoding_columns = _toggle(self.config.encoding_columns, column)

    def select_all_categorical(self, classification: ColumnClassification) -> None:
        self.config.encoding_columns = [
            c
            for c in classification.available_columns
            if classification.is_categorical(c)
        ]

    def clear_encoding_columns(self) -> None:
        self.config.encoding_columns = []

    # --- target ---------------------------------------------------------

    def set_target_column(self, column: Optional[str]) -> None:
        self.config.target_column = column or ""

    @property
    def requires_target_column(self) -> bool:
        return self.config.encoding_method.requires_target

    # --- derived defaults -----------------------------------------------

    def seed_column_subsets(self, classification: ColumnClassification) -> None:
        """Reset both subsets to the detected numeric/categorical columns."""
        self.config.scaling_columns = list(classification.numeric_columns)
        self.config.encoding_columns = list(classification.categorical_columns)

    def apply_suggestions(self, suggestions: Optional[Suggestions]) -> bool:
        """
        Seed the configuration from upstream suggestions.

        Each input is applied when it goes from empty to non-empty, so
        repeated notifications with the same suggestions do not clobber
        manual edits. Returns True when anything was adopted.
        """
        suggestions = suggestions or Suggestions()
        applied = False

        has_strategy = bool(suggestions.missing_strategies)
        if has_strategy and not self._strategy_seen:
            strategy = suggestions.first_missing_strategy()
            try:
                self.set_missing_strategy(strategy)
                applied = True
                logger.info(f"Adopted suggested missing-value strategy: {strategy}")
            except ValueError:
                logger.warning(f"Ignoring unknown suggested strategy: {strategy!r}")
        self._strategy_seen = has_strategy

        has_target = bool(suggestions.target_columns)
        if has_target and not self._target_seen:
            target = suggestions.first_target_column()
            if target:
                self.set_target_column(target)
                applied = True
                logger.info(f"Adopted suggested target column: {target}")
        self._target_seen = has_target

        return applied

    def reset_suggestions(self) -> None:
        """Forget previously seen suggestions so the next arrival applies again."""
        self._strategy_seen = False
        self._target_seen = False
