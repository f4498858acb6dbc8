import logging
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import RedirectResponse
from pydantic import ValidationError

from prepflow.config import Settings

from .classifier import classify_columns
from .dependencies import get_app_settings, get_orchestrator
from .orchestrator import BatchOrchestrator
from .schemas import (
    ClassifyRequest,
    ColumnClassification,
    PreprocessConfig,
    SubmissionResult,
    SubsetModes,
    UploadedDataset,
    ValidationRequest,
    ValidationResponse,
)
from .validator import check_submission

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/preprocess", tags=["Preprocessing"])


def _split_columns(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [c.strip() for c in value.split(",") if c.strip()]


@router.post("/columns", response_model=ColumnClassification)
async def classify(payload: ClassifyRequest):
    """
    Derive available, numeric and categorical columns from dataset summaries.
    """
    return classify_columns(payload.summaries)


@router.post("/validate", response_model=ValidationResponse)
async def validate(payload: ValidationRequest):
    """
    Run the pre-flight checks without submitting anything.
    """
    error = check_submission(payload.config, payload.datasets, payload.subset_modes)
    if error is None:
        return ValidationResponse(valid=True)
    return ValidationResponse(valid=False, error=error.message, type=error.__class__.__name__)


@router.post("/submit", response_model=SubmissionResult)
async def submit(
    files: Optional[List[UploadFile]] = File(None),
    missing_strategy: str = Form("mean"),
    scaling: bool = Form(True),
    scaling_columns: Optional[str] = Form(None),
    encoding: str = Form("onehot"),
    encoding_columns: Optional[str] = Form(None),
    target_column: str = Form(""),
    orchestrator: BatchOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_app_settings),
):
    """
    Submit uploaded datasets for preprocessing.

    Sending ``scaling_columns`` / ``encoding_columns`` turns on explicit subset
    selection for that operation. Blank fields count as not sent, so send
    a lone comma for an empty subset.
    """
    try:
        config = PreprocessConfig(
            missing_strategy=missing_strategy,
            scaling_enabled=scaling,
            scaling_columns=_split_columns(scaling_columns),
            encoding_method=encoding,
            encoding_columns=_split_columns(encoding_columns),
            target_column=target_column,
        )
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=e.errors(include_url=False, include_context=False),
        )

    subset_modes = SubsetModes(
        scaling=scaling_columns is not None,
        encoding=encoding_columns is not None,
    )

    datasets: List[UploadedDataset] = []
    for upload in files or []:
        filename = upload.filename or "unknown"
        extension = Path(filename).suffix.lstrip(".").lower()
        if extension not in settings.ALLOWED_EXTENSIONS:
            raise HTTPException(
                status_code=400, detail=f"Unsupported file type: {filename}"
            )
        datasets.append(
            UploadedDataset(
                name=filename,
                content=await upload.read(),
                content_type=upload.content_type or "application/octet-stream",
            )
        )

    logger.info(f"Preprocess submission received for {len(datasets)} file(s)")
    return await orchestrator.submit(datasets, config, subset_modes)


@router.get("/download/{filename}")
async def download(
    filename: str, orchestrator: BatchOrchestrator = Depends(get_orchestrator)
):
    """
    Redirect to the execution service's download URL for a preprocessed file.
    """
    return RedirectResponse(orchestrator.client.download_url(filename), status_code=307)
