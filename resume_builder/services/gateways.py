"""Async gateways giving the editing session access to resume storage."""

import asyncio
from typing import Any, Callable, List, Optional, Protocol
import httpx
from pydantic import ValidationError
from resume_builder.core.config import get_settings
from resume_builder.core.errors import (
    InvalidResumeIdError,
    ResumeNotFoundError,
    ResumeStorageError,
)
from resume_builder.models.request_models import ResumeCreateRequest
from resume_builder.models.resume_models import Resume, ResumeMeta, dump_resume
from resume_builder.services.resume_store import ResumeStore, get_resume_store


class ResumeGateway(Protocol):
    """Storage operations used by the editing session."""

    async def list_resumes(self) -> List[ResumeMeta]:
        ...

    async def get_resume(self, resume_id: str) -> Resume:
        ...

    async def create_resume(self, body: ResumeCreateRequest) -> Resume:
        ...

    async def update_resume(self, resume_id: str, resume: Resume) -> Resume:
        ...

    async def delete_resume(self, resume_id: str) -> None:
        ...


class LocalResumeGateway:
    """Gateway running a ResumeStore in the default executor."""

    def __init__(self, store: Optional[ResumeStore] = None):
        """
        Initialize the gateway.

        Args:
            store: Resume store. Defaults to the shared store
        """
        self.store = store or get_resume_store()

    async def list_resumes(self) -> List[ResumeMeta]:
        return await self._run(self.store.list_resumes)

    async def get_resume(self, resume_id: str) -> Resume:
        return await self._run(self.store.get_resume, resume_id)

    async def create_resume(self, body: ResumeCreateRequest) -> Resume:
        return await self._run(self.store.create_resume, body)

    async def update_resume(self, resume_id: str, resume: Resume) -> Resume:
        return await self._run(self.store.update_resume, resume_id, resume)

    async def delete_resume(self, resume_id: str) -> None:
        await self._run(self.store.delete_resume, resume_id)

    async def _run(self, func: Callable[..., Any], *args: Any) -> Any:
        # file I/O is blocking, keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func, *args)


class ResumeApiClient:
    """Gateway talking to the resume HTTP API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. http://localhost:8000. Defaults to the configured api_base_url
            timeout: Request timeout in seconds. Defaults to the configured request_timeout
            client: Shared httpx client. When None, a client is opened per request
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = timeout or settings.request_timeout
        self._client = client

    async def list_resumes(self) -> List[ResumeMeta]:
        response = await self._request("GET", "/resumes")
        return [self._parse(ResumeMeta, entry) for entry in self._json(response)]

    async def get_resume(self, resume_id: str) -> Resume:
        response = await self._request("GET", f"/resumes/{resume_id}", resume_id=resume_id)
        return self._parse(Resume, self._json(response))

    async def create_resume(self, body: ResumeCreateRequest) -> Resume:
        response = await self._request(
            "POST",
            "/resumes",
            json=body.model_dump(mode="json", exclude_none=True)
        )
        return self._parse(Resume, self._json(response))

    async def update_resume(self, resume_id: str, resume: Resume) -> Resume:
        response = await self._request(
            "PUT",
            f"/resumes/{resume_id}",
            resume_id=resume_id,
            json=dump_resume(resume)
        )
        return self._parse(Resume, self._json(response))

    async def delete_resume(self, resume_id: str) -> None:
        await self._request("DELETE", f"/resumes/{resume_id}", resume_id=resume_id)

    async def _request(
        self,
        method: str,
        path: str,
        resume_id: Optional[str] = None,
        **kwargs: Any
    ) -> httpx.Response:
        """
        Send a request and map failures to resume errors.

        Raises:
            ResumeNotFoundError: On 404 for a resume path
            InvalidResumeIdError: On 400 for a resume path
            ResumeStorageError: On timeouts, transport errors and other error statuses
        """
        url = f"{self.base_url}{path}"
        try:
            if self._client is not None:
                response = await self._client.request(method, url, **kwargs)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ResumeStorageError(f"Resume API request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise ResumeStorageError(f"Failed to communicate with resume API: {str(e)}") from e

        if resume_id is not None and response.status_code == 404:
            raise ResumeNotFoundError(resume_id)
        if resume_id is not None and response.status_code == 400:
            raise InvalidResumeIdError(resume_id)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ResumeStorageError(
                f"Resume API {method} {path} failed with status {response.status_code}"
            ) from e
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ResumeStorageError(
                f"Resume API returned a non-JSON body (status {response.status_code})"
            ) from e

    @staticmethod
    def _parse(model, data: Any):
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise ResumeStorageError(f"Unexpected response format: {e}") from e
