import logging
from pathlib import Path
from typing import (
    Any,
    AsyncIterable,
    AsyncIterator,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)
from urllib.parse import quote

import aiofiles  # type: ignore
import httpx

from prepflow.config import Settings, get_settings

from .schemas import PreprocessRequest, UploadedDataset

logger = logging.getLogger(__name__)

UploadProgress = Callable[[float], None]


class UploadProgressStream(httpx.AsyncByteStream):
    """
    Request body wrapper reporting the fraction of bytes the transport has taken.

    A chunk counts as sent once the transport asks for the next one, so the
    final 1.0 is reported only after the whole body has been consumed.
    """

    def __init__(self, stream: AsyncIterable[bytes], total: int, callback: UploadProgress):
        self._stream = stream
        self._total = total
        self._callback = callback

    async def __aiter__(self) -> AsyncIterator[bytes]:
        sent = 0
        async for chunk in self._stream:
            yield chunk
            sent += len(chunk)
            self._callback(min(sent / self._total, 1.0))


class PreprocessServiceClient:
    """
    Thin async client for the preprocessing execution service.

    One ``preprocess`` call uploads every dataset in a single multipart
    request; the service answers with one artifact reference per file.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.PREPROCESS_SERVICE_URL
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.settings.PREPROCESS_TIMEOUT_SECONDS,
            transport=transport,
        )

    async def __aenter__(self) -> "PreprocessServiceClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _endpoint(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _encode_files(
        datasets: Sequence[UploadedDataset],
    ) -> List[Tuple[str, Tuple[str, bytes, str]]]:
        return [
            ("files", (dataset.name, dataset.content, dataset.content_type))
            for dataset in datasets
        ]

    @staticmethod
    def _parse_artifacts(payload: Any) -> Dict[str, str]:
        if not isinstance(payload, dict):
            raise ValueError(
                f"Unexpected preprocess response type: {type(payload).__name__}"
            )

        artifacts: Dict[str, str] = {}
        for dataset_id, entry in payload.items():
            if isinstance(entry, dict):
                reference = entry.get("preprocessed_file")
            else:
                reference = entry
            if not isinstance(reference, str) or not reference:
                raise ValueError(f"Missing preprocessed file for dataset '{dataset_id}'")
            artifacts[dataset_id] = reference
        return artifacts

    async def preprocess(
        self,
        datasets: Sequence[UploadedDataset],
        request: PreprocessRequest,
        on_upload_progress: Optional[UploadProgress] = None,
    ) -> Dict[str, str]:
        """
        Submit all datasets in one request.

        Returns:
            dataset identifier -> artifact reference

        Raises:
            httpx.HTTPError: transport failure or non-2xx response
            ValueError: response body does not match the expected shape
        """
        files = self._encode_files(datasets)
        url = self._endpoint(self.settings.PREPROCESS_ENDPOINT)
        logger.info(f"Submitting {len(files)} dataset(s) to {url}")

        http_request = self._client.build_request(
            "POST", url, data=request.to_form(), files=files
        )
        total = int(http_request.headers.get("Content-Length") or 0)
        if on_upload_progress and total:
            http_request.stream = UploadProgressStream(
                http_request.stream, total, on_upload_progress
            )

        response = await self._client.send(http_request)
        response.raise_for_status()
        return self._parse_artifacts(response.json())

    def download_url(self, filename: str) -> str:
        return self._endpoint(f"{self.settings.DOWNLOAD_ENDPOINT}/{quote(filename)}")

    async def download(self, filename: str, destination: Union[str, Path]) -> Path:
        """Stream a preprocessed artifact to ``destination``."""
        target = Path(destination)
        if target.is_dir():
            target = target / filename
        target.parent.mkdir(parents=True, exist_ok=True)

        async with self._client.stream("GET", self.download_url(filename)) as response:
            response.raise_for_status()
            async with aiofiles.open(target, "wb") as out_file:
                async for chunk in response.aiter_bytes():
                    await out_file.write(chunk)

        logger.info(f"Downloaded {filename} to {target}")
        return target
