"""Pytest configuration helpers for the prepflow test suite."""

import os
import sys
from pathlib import Path
from typing import Callable, Dict, List

import httpx
import pytest

os.environ["PREPFLOW_ENV"] = "testing"

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from prepflow.config import TestingSettings  # noqa: E402
from prepflow.preprocessing.client import PreprocessServiceClient  # noqa: E402
from prepflow.preprocessing.schemas import UploadedDataset  # noqa: E402


@pytest.fixture
def settings() -> TestingSettings:
    return TestingSettings(LOG_FILE="logs/test_prepflow.log")


@pytest.fixture
def mixed_summaries() -> Dict[str, dict]:
    """Two datasets that overlap on some columns and disagree on one tag."""
    return {
        "train.csv": {
            "summary": {
                "columns": ["age", "income", "city", "churned"],
                "dtypes": {
                    "age": "int64",
                    "income": "float64",
                    "city": "object",
                    "churned": "bool",
                },
            }
        },
        "test.csv": {
            "summary": {
                "columns": ["age", "city", "signup", "segment"],
                "dtypes": {
                    "age": "object",
                    "city": "category",
                    "signup": "datetime64[ns]",
                    "segment": "string",
                },
            }
        },
    }


@pytest.fixture
def make_datasets() -> Callable[..., List[UploadedDataset]]:
    def _make(*names: str) -> List[UploadedDataset]:
        return [
            UploadedDataset(name=name, content=b"x,y\n1,a\n2,b\n") for name in names
        ]

    return _make


def artifacts_for(request: httpx.Request) -> Dict[str, dict]:
    """Build the service's success payload from the uploaded file names."""
    body = request.content.decode("utf-8", errors="ignore")
    names = []
    for chunk in body.split('filename="')[1:]:
        names.append(chunk.split('"', 1)[0])
    return {name: {"preprocessed_file": f"preprocessed_{name}"} for name in names}


@pytest.fixture
def echo_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Execution service stub answering one artifact per uploaded file."""

    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=artifacts_for(request))

    return _handler


@pytest.fixture
def make_client(settings) -> Callable[..., PreprocessServiceClient]:
    def _make(handler) -> PreprocessServiceClient:
        return PreprocessServiceClient(settings, transport=httpx.MockTransport(handler))

    return _make


def form_fields(request: httpx.Request) -> Dict[str, str]:
    """Extract plain multipart form fields (not files) from a captured request."""
    body = request.content.decode("utf-8", errors="ignore")
    fields: Dict[str, str] = {}
    for part in body.split("Content-Disposition: form-data; ")[1:]:
        header, _, rest = part.partition("\r\n\r\n")
        if "filename=" in header:
            continue
        name = header.split('name="', 1)[1].split('"', 1)[0]
        fields[name] = rest.rsplit("\r\n--", 1)[0]
    return fields


@pytest.fixture
def parse_form() -> Callable[[httpx.Request], Dict[str, str]]:
    return form_fields
