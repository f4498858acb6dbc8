import asyncio

import httpx
import pytest

from prepflow.main import create_app
from prepflow.preprocessing.orchestrator import BatchOrchestrator
from prepflow.preprocessing.schemas import PreprocessConfig


@pytest.fixture
def make_api(settings, make_client, echo_handler):
    """Build an httpx client bound to a fresh app with a stubbed execution service."""

    def _make(handler=None, orchestrator=None):
        orchestrator = orchestrator or BatchOrchestrator(make_client(handler or echo_handler))
        app = create_app(settings, orchestrator=orchestrator)
        transport = httpx.ASGITransport(app=app)
        return httpx.AsyncClient(transport=transport, base_url="http://test")

    return _make


def _upload(*names):
    return [("files", (name, b"x,y\n1,a\n", "text/csv")) for name in names]


@pytest.mark.asyncio
async def test_columns_endpoint(make_api, mixed_summaries):
    async with make_api() as api:
        response = await api.post("/api/preprocess/columns", json={"summaries": mixed_summaries})

    assert response.status_code == 200
    body = response.json()
    assert body["available_columns"] == ["age", "income", "city", "churned", "signup", "segment"]
    assert body["numeric_columns"] == ["age", "income"]
    assert body["categorical_columns"] == ["city", "age", "segment"]
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_validate_endpoint(make_api):
    async with make_api() as api:
        ok = await api.post(
            "/api/preprocess/validate",
            json={"config": {}, "datasets": ["a.csv"]},
        )
        bad = await api.post(
            "/api/preprocess/validate",
            json={"config": {"encoding_method": "target"}, "datasets": ["a.csv"]},
        )

    assert ok.json() == {"valid": True, "error": None, "type": None}
    assert bad.json() == {
        "valid": False,
        "error": "Please select a target column for target encoding.",
        "type": "MissingTargetColumnError",
    }


@pytest.mark.asyncio
async def test_submit_success(make_api, parse_form):
    captured = {}

    def handler(request):
        captured["form"] = parse_form(request)
        return httpx.Response(
            200,
            json={
                "a.csv": {"preprocessed_file": "preprocessed_a.csv"},
                "b.csv": {"preprocessed_file": "preprocessed_b.csv"},
            },
        )

    async with make_api(handler) as api:
        response = await api.post(
            "/api/preprocess/submit",
            data={"encoding": "kfold", "target_column": "y", "scaling_columns": "age, income"},
            files=_upload("a.csv", "b.csv"),
        )

    assert response.status_code == 200
    assert response.json() == {
        "files": {"a.csv": "preprocessed_a.csv", "b.csv": "preprocessed_b.csv"}
    }
    assert captured["form"]["scaling_columns"] == "age,income"
    assert captured["form"]["target_column"] == "y"
    assert "encoding_columns" not in captured["form"]


@pytest.mark.asyncio
async def test_submit_validation_error(make_api):
    async with make_api() as api:
        response = await api.post(
            "/api/preprocess/submit",
            data={"encoding": "target"},
            files=_upload("a.csv"),
        )

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "MissingTargetColumnError"
    assert body["message"] == "Please select a target column for target encoding."
    assert body["request_id"] == response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_submit_without_files(make_api):
    async with make_api() as api:
        response = await api.post("/api/preprocess/submit", data={"missing_strategy": "drop"})

    assert response.status_code == 400
    assert response.json()["message"] == "Please upload files first."


@pytest.mark.asyncio
async def test_submit_comma_only_subset_is_empty(make_api):
    async with make_api() as api:
        response = await api.post(
            "/api/preprocess/submit",
            data={"encoding_columns": ","},
            files=_upload("a.csv"),
        )

    assert response.status_code == 400
    assert response.json()["error"] == "EmptyEncodingSubsetError"


@pytest.mark.asyncio
async def test_submit_rejects_unknown_options(make_api):
    async with make_api() as api:
        response = await api.post(
            "/api/preprocess/submit",
            data={"missing_strategy": "interpolate"},
            files=_upload("a.csv"),
        )

    assert response.status_code == 422
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_submit_rejects_unsupported_extension(make_api):
    async with make_api() as api:
        response = await api.post("/api/preprocess/submit", files=_upload("model.pkl"))

    assert response.status_code == 400
    assert response.json()["message"] == "Unsupported file type: model.pkl"


@pytest.mark.asyncio
async def test_submit_service_failure_is_bad_gateway(make_api):
    def handler(request):
        return httpx.Response(500, json={"error": "Target column 'y' not found"})

    async with make_api(handler) as api:
        response = await api.post("/api/preprocess/submit", files=_upload("a.csv"))

    assert response.status_code == 502
    body = response.json()
    assert body["error"] == "OrchestrationError"
    assert body["message"] == "Target column 'y' not found"
    assert body["details"]["datasets"] == ["a.csv"]


@pytest.mark.asyncio
async def test_submit_while_busy_conflicts(make_api, make_datasets):
    release = asyncio.Event()
    entered = asyncio.Event()

    class SlowClient:
        async def preprocess(self, datasets, request, on_upload_progress=None):
            entered.set()
            await release.wait()
            return {d.name: f"preprocessed_{d.name}" for d in datasets}

    orchestrator = BatchOrchestrator(SlowClient())
    pending = asyncio.create_task(
        orchestrator.submit(make_datasets("a.csv"), PreprocessConfig())
    )
    await entered.wait()

    async with make_api(orchestrator=orchestrator) as api:
        response = await api.post("/api/preprocess/submit", files=_upload("b.csv"))

    release.set()
    await pending

    assert response.status_code == 409
    assert response.json()["error"] == "SubmissionInProgressError"


@pytest.mark.asyncio
async def test_download_redirects_to_service(make_api):
    async with make_api() as api:
        response = await api.get("/api/preprocess/download/preprocessed_a.csv")

    assert response.status_code == 307
    assert (
        response.headers["location"]
        == "http://preprocess.test/download/preprocessed/preprocessed_a.csv"
    )


@pytest.mark.asyncio
async def test_request_validation_envelope(make_api):
    async with make_api() as api:
        response = await api.post("/api/preprocess/columns", json={"summaries": []})

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "Unprocessable Entity"
    assert body["details"]["errors"]


@pytest.mark.asyncio
async def test_submit_rejects_duplicate_file_names(make_api):
    async with make_api() as api:
        response = await api.post("/api/preprocess/submit", files=_upload("a.csv", "a.csv"))

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "DuplicateDatasetError"
    assert body["details"] == {"duplicates": ["a.csv"]}
