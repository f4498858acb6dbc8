from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MissingStrategy(str, Enum):
    MEAN = "mean"
    MEDIAN = "median"
    MODE = "mode"
    DROP = "drop"

    @property
    def description(self) -> str:
        return _MISSING_DESCRIPTIONS[self]


class EncodingMethod(str, Enum):
    ONEHOT = "onehot"
    LABEL = "label"
    TARGET = "target"
    KFOLD = "kfold"

    @property
    def requires_target(self) -> bool:
        """Target and k-fold target encoding leak labels without a target column."""
        return self in (EncodingMethod.TARGET, EncodingMethod.KFOLD)

    @property
    def description(self) -> str:
        return _ENCODING_DESCRIPTIONS[self]


_MISSING_DESCRIPTIONS = {
    MissingStrategy.MEAN: "Replace missing values with the mean of the column",
    MissingStrategy.MEDIAN: "Replace missing values with the median of the column",
    MissingStrategy.MODE: "Replace missing values with the most frequent value",
    MissingStrategy.DROP: "Remove rows with missing values",
}

_ENCODING_DESCRIPTIONS = {
    EncodingMethod.ONEHOT: "One-hot encoding creates binary columns for each category",
    EncodingMethod.LABEL: "Label encoding converts categories to numeric values",
    EncodingMethod.TARGET: "Target encoding uses the target variable to encode categorical features",
    EncodingMethod.KFOLD: "K-Fold target encoding prevents data leakage by using cross-validation",
}


def _dedupe(values: List[str]) -> List[str]:
    return list(dict.fromkeys(values))


class DatasetSummary(BaseModel):
    """Schema metadata for one uploaded dataset, as computed upstream."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    columns: List[str]
    dtypes: Dict[str, str] = Field(default_factory=dict, alias="data_types")

    @field_validator("dtypes", mode="before")
    @classmethod
    def stringify_tags(cls, v):
        if isinstance(v, dict):
            return {str(k): str(tag) for k, tag in v.items() if tag is not None}
        return v


class ColumnClassification(BaseModel):
    available_columns: List[str] = Field(default_factory=list)
    numeric_columns: List[str] = Field(default_factory=list)
    categorical_columns: List[str] = Field(default_factory=list)

    @classmethod
    def empty(cls) -> "ColumnClassification":
        return cls()

    def is_numeric(self, column: str) -> bool:
        return column in self.numeric_columns

    def is_categorical(self, column: str) -> bool:
        return column in self.categorical_columns


class PreprocessConfig(BaseModel):
    """Operator-selected preprocessing options."""

    model_config = ConfigDict(validate_assignment=True)

    missing_strategy: MissingStrategy = MissingStrategy.MEAN
    scaling_enabled: bool = True
    scaling_columns: List[str] = Field(default_factory=list)
    encoding_method: EncodingMethod = EncodingMethod.ONEHOT
    encoding_columns: List[str] = Field(default_factory=list)
    target_column: str = ""

    @field_validator("scaling_columns", "encoding_columns")
    @classmethod
    def dedupe_columns(cls, v: List[str]) -> List[str]:
        return _dedupe(v)

    @field_validator("target_column", mode="before")
    @classmethod
    def none_target_is_empty(cls, v):
        return "" if v is None else v


class SubsetModes(BaseModel):
    """Whether scaling/encoding are restricted to an explicit column subset."""

    scaling: bool = False
    encoding: bool = False


class Suggestions(BaseModel):
    """Per-dataset defaults suggested by upstream analysis."""

    missing_strategies: Dict[str, str] = Field(default_factory=dict)
    target_columns: Dict[str, Optional[str]] = Field(default_factory=dict)

    def first_missing_strategy(self) -> Optional[str]:
        for value in self.missing_strategies.values():
            return value
        return None

    def first_target_column(self) -> Optional[str]:
        for value in self.target_columns.values():
            return value
        return None


class UploadedDataset(BaseModel):
    """Raw dataset handle submitted to the execution service."""

    name: str
    content: bytes
    content_type: str = "text/csv"

    @classmethod
    def from_path(
        cls, path: Union[str, Path], content_type: str = "text/csv"
    ) -> "UploadedDataset":
        file_path = Path(path)
        return cls(name=file_path.name, content=file_path.read_bytes(), content_type=content_type)


class PreprocessRequest(BaseModel):
    """Form fields sent alongside the uploaded files."""

    missing_strategy: MissingStrategy
    scaling: bool
    scaling_columns: Optional[str] = None
    encoding: EncodingMethod
    encoding_columns: Optional[str] = None
    target_column: str = ""

    def to_form(self) -> Dict[str, str]:
        form = {
            "missing_strategy": self.missing_strategy.value,
            "scaling": "true" if self.scaling else "false",
            "encoding": self.encoding.value,
            "target_column": self.target_column,
        }
        if self.scaling_columns is not None:
            form["scaling_columns"] = self.scaling_columns
        if self.encoding_columns is not None:
            form["encoding_columns"] = self.encoding_columns
        return form


class SubmissionResult(BaseModel):
    """Artifact reference per input dataset, delivered as one batch."""

    files: Dict[str, str]

    def dataset_ids(self) -> List[str]:
        return list(self.files)


class ValidationRequest(BaseModel):
    config: PreprocessConfig = Field(default_factory=PreprocessConfig)
    subset_modes: SubsetModes = Field(default_factory=SubsetModes)
    datasets: List[str] = Field(default_factory=list)


class ValidationResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
    type: Optional[str] = None


class ClassifyRequest(BaseModel):
    # Values stay loosely typed; the classifier tolerates malformed entries
    summaries: Dict[str, Any] = Field(default_factory=dict)
