"""HTTP client for the ``/api`` endpoints used by the task list."""

from typing import Any, Dict, List, Optional

import httpx
import structlog

log = structlog.get_logger()

DEFAULT_API_URL = "http://localhost:3000/api"


class ApiError(Exception):
    """Non-2xx response or transport failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class TodoApiClient:
    """Thin wrapper over ``httpx.Client``.

    ``http`` may be any preconfigured ``httpx.Client`` (a FastAPI
    ``TestClient`` works) whose base URL points at the API root.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        email: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self.email = email.strip() if email and email.strip() else None
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "TodoApiClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if self.email:
            headers["X-User-Email"] = self.email

        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            log.warning("api_request_failed", method=method, path=path, error=str(exc))
            raise ApiError(f"Could not reach the server: {exc}") from exc

        if response.is_error:
            try:
                body = response.json()
            except ValueError:
                body = None
            message = (body.get("detail") if isinstance(body, dict) else None) or response.reason_phrase
            raise ApiError(f"{method} {path} failed ({response.status_code}): {message}", response.status_code)
        return response

    def list_todos(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/todos").json()

    def create_todo(self, text: str) -> Dict[str, Any]:
        return self._request("POST", "/todos", json={"text": text}).json()

    def update_todo(self, task_id: str, **changes: Any) -> Dict[str, Any]:
        return self._request("PATCH", f"/todos/{task_id}", json=changes).json()

    def delete_todo(self, task_id: str) -> None:
        self._request("DELETE", f"/todos/{task_id}")

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/tasks").json()

    def create_or_get_user(self, email: str) -> Dict[str, Any]:
        return self._request("POST", "/users", json={"email": email}).json()
