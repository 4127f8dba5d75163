"""
Project Store Client
====================
Async HTTP client for the remote project store, used by the test-case wizard.

Every transport failure, timeout or non-2xx response is raised as a
RemoteStoreError subclass. Nothing is retried here; the wizard surfaces the
error and lets the user retry.

Usage:
    from sentinel.client import ProjectStoreClient

    async with ProjectStoreClient(token=access_token) as store:
        project = await store.create_project({"name": "Checkout", ...})
        cases = await store.generate_test_cases(project["id"], ...)
"""

import re
from typing import Any, Dict, List, Optional, Tuple

import httpx

from sentinel.core.config import settings
from sentinel.core.exceptions import RemoteStoreError, StoreTimeoutError, StoreResponseError
from sentinel.core.logging_config import logger

FILENAME_PATTERN = re.compile(r'filename="?([^";]+)"?')


def _error_message(response: httpx.Response) -> str:
    """Pull a readable message out of an error body"""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message", ""))
        if error:
            return str(error)
        if body.get("detail"):
            return str(body["detail"])
    return ""


class ProjectStoreClient:
    """Thin wrapper over the /api/v1 project, test-case and function endpoints"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (base_url or settings.STORE_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.STORE_REQUEST_TIMEOUT
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._get_headers(),
            transport=transport,
        )

    def _get_headers(self) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def __aenter__(self) -> "ProjectStoreClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(self, operation: str, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.warning(f"[Store] {operation} timed out: {e}")
            raise StoreTimeoutError(operation, self.timeout) from e
        except httpx.HTTPError as e:
            logger.warning(f"[Store] {operation} transport error: {e}")
            raise RemoteStoreError(f"Store request '{operation}' failed: {e}", operation) from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"[Store] {operation} -> HTTP {response.status_code} {message}")
            raise StoreResponseError(operation, response.status_code, message)

        return response

    @staticmethod
    def _decode(operation: str, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.warning(f"[Store] {operation} returned a non-JSON body")
            raise RemoteStoreError(f"Store request '{operation}' returned invalid JSON", operation) from e

    async def _json(self, operation: str, method: str, path: str, **kwargs) -> Any:
        response = await self._request(operation, method, path, **kwargs)
        return self._decode(operation, response)

    async def _call_function(self, name: str, payload: Dict[str, Any]) -> Any:
        body = await self._json(name, "POST", f"/functions/{name}", json=payload)
        if not isinstance(body, dict) or not body.get("success"):
            raise RemoteStoreError(f"Function '{name}' did not report success", name)
        return body.get("data")

    # ---------- projects ----------

    async def create_project(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("create-project", "POST", "/projects", json=payload)

    async def update_project(self, project_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json("update-project", "PATCH", f"/projects/{project_id}", json=payload)

    async def get_project(self, project_id: str) -> Dict[str, Any]:
        return await self._json("get-project", "GET", f"/projects/{project_id}")

    async def list_projects(self) -> List[Dict[str, Any]]:
        body = await self._json("list-projects", "GET", "/projects")
        return body["projects"]

    async def set_phase(self, project_id: str, phase: int) -> Dict[str, Any]:
        return await self._json("set-phase", "POST", f"/projects/{project_id}/phase", json={"phase": phase})

    async def delete_project(self, project_id: str) -> None:
        await self._request("delete-project", "DELETE", f"/projects/{project_id}")

    # ---------- test cases ----------

    async def list_test_cases(self, project_id: str) -> List[Dict[str, Any]]:
        return await self._json("list-test-cases", "GET", f"/projects/{project_id}/test-cases")

    async def create_test_case(self, project_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._json(
            "create-test-case", "POST", f"/projects/{project_id}/test-cases", json=payload
        )

    async def update_test_case(
        self, project_id: str, test_case_id: str, payload: Dict[str, Any]
    ) -> Dict[str, Any]:
        return await self._json(
            "update-test-case", "PATCH", f"/projects/{project_id}/test-cases/{test_case_id}", json=payload
        )

    async def delete_test_case(self, project_id: str, test_case_id: str) -> None:
        await self._request(
            "delete-test-case", "DELETE", f"/projects/{project_id}/test-cases/{test_case_id}"
        )

    # ---------- scoring functions ----------

    async def generate_test_cases(
        self,
        project_id: str,
        project_name: str,
        module_name: str,
        test_kind: str,
        parameters: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        return await self._call_function("generate-test-cases", {
            "projectId": project_id,
            "projectName": project_name,
            "moduleName": module_name,
            "testKind": test_kind,
            "parameters": parameters or {},
        })

    async def analyze_tests(self, project_id: str, test_kind: str) -> Dict[str, Any]:
        return await self._call_function("analyze-tests", {
            "projectId": project_id,
            "testKind": test_kind,
        })

    # ---------- analysis ----------

    async def latest_analysis(self, project_id: str) -> Optional[Dict[str, Any]]:
        """Most recent analysis, or None when the project has not been analyzed yet"""
        try:
            return await self._json("latest-analysis", "GET", f"/projects/{project_id}/analysis/latest")
        except StoreResponseError as e:
            if e.details.get("status") == 404:
                return None
            raise

    async def export_analysis(self, project_id: str) -> Tuple[str, Dict[str, Any]]:
        response = await self._request("export-analysis", "GET", f"/projects/{project_id}/analysis/export")
        match = FILENAME_PATTERN.search(response.headers.get("content-disposition", ""))
        filename = match.group(1) if match else f"{project_id}-analysis.json"
        return filename, self._decode("export-analysis", response)
