"""
HTTP client for the project and permission management API.
"""
from typing import Any, Optional

import httpx

from app.utils import get_logger


log = get_logger(__name__)


class ApiError(Exception):
    """Non-2xx response from the management API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class PermissionsClient:
    """
    Thin wrapper over the management endpoints.

    Responses are returned as decoded JSON with the server's camelCase keys.

    Usage:
        client = PermissionsClient(httpx.Client(base_url="http://127.0.0.1:8000"))
        project = client.add_project("Billing")
        client.add_permission(project["id"], "invoice.read")
    """

    def __init__(self, http: httpx.Client):
        self.http = http

    @classmethod
    def from_url(cls, base_url: str, timeout: float = 10.0) -> "PermissionsClient":
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def _request(self, method: str, url: str, json: Optional[dict] = None) -> Any:
        response = self.http.request(method, url, json=json)
        if response.is_error:
            try:
                message = response.json().get("error") or response.reason_phrase
            except ValueError:
                message = response.text or response.reason_phrase
            log.warning("%s %s failed with %s: %s", method, url, response.status_code, message)
            raise ApiError(response.status_code, message)
        return response.json()

    # Projects
    def load_projects(self) -> list[dict]:
        return self._request("GET", "/projects")

    def add_project(self, name: str, description: Optional[str] = None) -> dict:
        return self._request("POST", "/projects", json={"name": name, "description": description})

    def delete_project(self, project_id: int) -> dict:
        return self._request("DELETE", f"/projects/{project_id}")

    # Permissions
    def add_permission(self, project_id: int, key: str, description: Optional[str] = None) -> dict:
        return self._request(
            "POST", "/permissions",
            json={"projectId": project_id, "key": key, "description": description},
        )

    def update_permission(self, permission_id: int, key: str, description: Optional[str] = None) -> dict:
        return self._request(
            "PUT", f"/permissions/{permission_id}",
            json={"key": key, "description": description},
        )

    def delete_permission(self, permission_id: int) -> dict:
        return self._request("DELETE", f"/permissions/{permission_id}")

    # Groups
    def add_permission_group(self, project_id: int, name: str) -> dict:
        return self._request("POST", f"/projects/{project_id}/groups", json={"name": name})

    def delete_permission_group(self, group_id: int) -> dict:
        return self._request("DELETE", f"/groups/{group_id}")

    def update_group_permission(self, group_id: int, permission_id: int, enabled: bool) -> dict:
        return self._request(
            "POST", f"/groups/{group_id}/permissions",
            json={"permissionId": permission_id, "enabled": enabled},
        )

    # Export
    def export_project(self, api_key: str) -> dict:
        return self._request("GET", f"/export/project/{api_key}")
