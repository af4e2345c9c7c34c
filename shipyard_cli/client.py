"""
HTTP client for the Shipyard API.

Thin wrapper over ``httpx.Client``: one method per endpoint, JSON in and out,
non-2xx responses raised as ``ApiError`` carrying the server's ``detail``.
Connection failures are retried with exponential backoff.
"""

from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential


class ApiError(Exception):
    """Request reached the API but was rejected."""

    def __init__(self, status_code: int, detail: Any):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{status_code}: {self.message}")

    @property
    def message(self) -> str:
        if isinstance(self.detail, list):
            # Validation errors: [{"loc": [...], "msg": "..."}]
            return "; ".join(
                f"{'.'.join(str(p) for p in err.get('loc', [])[1:])}: {err.get('msg')}"
                if isinstance(err, dict) else str(err)
                for err in self.detail
            )
        return str(self.detail)


class ApiClient:
    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/api",
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @retry(
        retry=retry_if_exception_type(httpx.ConnectError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    def _request(self, method: str, path: str, **kwargs) -> Any:
        response = self._client.request(method, path, **kwargs)
        if response.status_code >= 400:
            try:
                body = response.json()
                detail = body.get("detail", body) if isinstance(body, dict) else body
            except ValueError:
                detail = response.text or response.reason_phrase
            raise ApiError(response.status_code, detail)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    @staticmethod
    def _params(**params) -> Dict[str, Any]:
        return {k: v for k, v in params.items() if v is not None}

    # ── Health ──

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/health")

    # ── Projects ──

    def get_projects(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/projects")

    def get_project(self, project_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/projects/{project_id}")

    def create_project(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/projects", json=data)

    def update_project(self, project_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/projects/{project_id}", json=data)

    def delete_project(self, project_id: int) -> None:
        self._request("DELETE", f"/projects/{project_id}")

    def get_project_activities(self, project_id: int, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._request("GET", f"/projects/{project_id}/activities", params=self._params(limit=limit))

    # ── Domains ──

    def get_domains(self, project_id: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/domains", params=self._params(projectId=project_id))

    def create_domain(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/domains", json=data)

    def update_domain(self, domain_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PATCH", f"/domains/{domain_id}", json=data)

    def delete_domain(self, domain_id: int) -> None:
        self._request("DELETE", f"/domains/{domain_id}")

    # ── Databases ──

    def get_databases(self, project_id: Optional[int] = None, type: Optional[str] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/databases", params=self._params(projectId=project_id, type=type))

    def get_database(self, database_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/databases/{database_id}")

    def create_database(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/databases", json=data)

    def delete_database(self, database_id: int) -> None:
        self._request("DELETE", f"/databases/{database_id}")

    # ── Activities & metrics ──

    def get_activities(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        return self._request("GET", "/activities", params=self._params(limit=limit))

    def get_system_metrics(self) -> Dict[str, Any]:
        return self._request("GET", "/system-metrics")
