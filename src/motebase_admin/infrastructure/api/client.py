"""REST client for the MoteBase HTTP API.

Every non-2xx response becomes an ApiError carrying the server's `error` or
`message` text (or a generic status message when the body is not JSON).
A 204 response is a successful empty result. A 2xx body that is not JSON, or
that does not match its response model, is reported as an ApiError too.
"""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from motebase_admin.core.config import Settings, get_settings
from motebase_admin.core.exceptions import ApiError
from motebase_admin.core.logging import get_logger
from motebase_admin.domain.services.record_form import WritePayload
from motebase_admin.domain.services.relation_resolver import RecordLookup
from motebase_admin.infrastructure.api.schemas import (
    ImportRequest,
    ListPage,
    LoginRequest,
    LoginResponse,
    RetryAllResponse,
)

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if message:
            return str(message)
    return f"Request failed with status {response.status_code}"


class MoteBaseClient:
    """Async client for the endpoints the console consumes.

    Args:
        base_url: API root, e.g. "http://localhost:8080/api".
        token: Bearer token sent with every request when set.
        timeout: Seconds before a request is abandoned (None waits indefinitely).
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None, token: str | None = None) -> "MoteBaseClient":
        settings = settings or get_settings()
        return cls(settings.base_url, token=token, timeout=settings.request_timeout)

    async def __aenter__(self) -> "MoteBaseClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        data: dict[str, str] | None = None,
        files: dict[str, tuple[str, bytes, str]] | None = None,
    ) -> httpx.Response:
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}
        try:
            response = await self._http.request(
                method,
                path,
                params=params or None,
                json=json,
                data=data,
                files=files,
                headers=self._headers(),
            )
        except httpx.HTTPError as e:
            logger.warning("API request failed", method=method, path=path, error=str(e))
            raise ApiError(f"Request failed: {e}") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning(
                "API request rejected",
                method=method,
                path=path,
                status_code=response.status_code,
                error=message,
            )
            raise ApiError(message, status_code=response.status_code)

        logger.debug("API request completed", method=method, path=path, status_code=response.status_code)
        return response

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and decode its JSON body (None for empty results)."""
        response = await self._send(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("API response is not JSON", method=method, path=path)
            raise ApiError(f"Invalid response from {path}", status_code=response.status_code) from e

    async def _request_model(self, model: type[ModelT], method: str, path: str, **kwargs: Any) -> ModelT:
        """Send a request and validate its JSON body against a response model."""
        data = await self.request(method, path, **kwargs)
        try:
            return model.model_validate(data or {})
        except ValidationError as e:
            logger.warning("API response did not match", method=method, path=path, error=str(e))
            raise ApiError(f"Invalid response from {path}") from e

    # Auth

    async def login(self, email: str, password: str) -> LoginResponse:
        body = LoginRequest(email=email, password=password)
        return await self._request_model(LoginResponse, "POST", "/auth/login", json=body.model_dump())

    # Collections

    async def list_collections(self) -> list[dict[str, Any]]:
        data = await self.request("GET", "/collections")
        if isinstance(data, dict) and isinstance(data.get("items"), list):
            return data["items"]
        if isinstance(data, list):
            return data
        return []

    async def create_collection(self, body: dict[str, Any]) -> Any:
        return await self.request("POST", "/collections", json=body)

    async def update_collection(self, name: str, body: dict[str, Any]) -> Any:
        return await self.request("PATCH", f"/collections/{_segment(name)}", json=body)

    async def delete_collection(self, name: str) -> None:
        await self.request("DELETE", f"/collections/{_segment(name)}")

    async def export_collections(self) -> Any:
        return await self.request("GET", "/collections/export")

    async def import_collections(self, collections: list[dict[str, Any]], delete_missing: bool) -> Any:
        body = ImportRequest(collections=collections, delete_missing=delete_missing)
        return await self.request("POST", "/collections/import", json=body.model_dump(by_alias=True))

    # Records

    def _records_path(self, collection: str, record_id: Any = None) -> str:
        path = f"/collections/{_segment(collection)}/records"
        if record_id is not None:
            path += f"/{_segment(record_id)}"
        return path

    async def list_records(self, collection: str, params: dict[str, Any] | None = None) -> ListPage:
        return await self._request_model(ListPage, "GET", self._records_path(collection), params=params)

    async def get_record(self, collection: str, record_id: Any) -> dict[str, Any]:
        return await self.request("GET", self._records_path(collection, record_id))

    async def _write_record(self, method: str, path: str, payload: WritePayload) -> Any:
        if payload.is_multipart:
            return await self.request(method, path, data=payload.data, files=payload.files)
        return await self.request(method, path, json=payload.json)

    async def create_record(self, collection: str, payload: WritePayload) -> Any:
        return await self._write_record("POST", self._records_path(collection), payload)

    async def update_record(self, collection: str, record_id: Any, payload: WritePayload) -> Any:
        return await self._write_record("PATCH", self._records_path(collection, record_id), payload)

    async def delete_record(self, collection: str, record_id: Any) -> None:
        await self.request("DELETE", self._records_path(collection, record_id))

    # Files

    def file_path(self, collection: str, record_id: Any, filename: str) -> str:
        return f"/files/{_segment(collection)}/{_segment(record_id)}/{_segment(filename)}"

    def file_url(self, collection: str, record_id: Any, filename: str) -> str:
        return f"{self.base_url}{self.file_path(collection, record_id, filename)}"

    # Settings

    async def get_settings(self) -> dict[str, Any]:
        return await self.request("GET", "/settings")

    async def update_settings(self, settings: dict[str, Any]) -> dict[str, Any]:
        return await self.request("PATCH", "/settings", json=settings)

    # Logs

    async def list_logs(self, params: dict[str, Any] | None = None) -> ListPage:
        return await self._request_model(ListPage, "GET", "/logs", params=params)

    async def logs_stats(self) -> dict[str, Any] | None:
        return await self.request("GET", "/logs/stats")

    async def clear_logs(self) -> None:
        await self.request("DELETE", "/logs")

    # Jobs

    async def list_jobs(self, params: dict[str, Any] | None = None) -> ListPage:
        return await self._request_model(ListPage, "GET", "/jobs", params=params)

    async def jobs_stats(self) -> dict[str, Any] | None:
        return await self.request("GET", "/jobs/stats")

    async def retry_job(self, job_id: Any) -> None:
        await self.request("POST", f"/jobs/{_segment(job_id)}/retry")

    async def retry_all_jobs(self) -> RetryAllResponse:
        return await self._request_model(RetryAllResponse, "POST", "/jobs/retry-all")

    async def delete_job(self, job_id: Any) -> None:
        await self.request("DELETE", f"/jobs/{_segment(job_id)}")

    async def clear_jobs(self, status: str | None = None) -> None:
        await self.request("DELETE", "/jobs", params={"status": status})

    # Crons

    async def list_crons(self) -> list[dict[str, Any]]:
        data = await self.request("GET", "/crons")
        if isinstance(data, dict):
            return list(data.get("items") or [])
        return list(data or [])


class ClientRecordLookup(RecordLookup):
    """RecordLookup backed by the REST client, for relation pickers."""

    def __init__(self, client: MoteBaseClient, page_size: int = 20) -> None:
        self.client = client
        self.page_size = page_size

    async def lookup(self, collection_name: str, filter: str = "") -> list[dict[str, Any]]:
        page = await self.client.list_records(
            collection_name, {"perPage": self.page_size, "filter": filter}
        )
        return page.items

    async def get(self, collection_name: str, record_id: Any) -> dict[str, Any]:
        return await self.client.get_record(collection_name, record_id)
