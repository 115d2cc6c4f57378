import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class APIError(Exception):
    def __init__(
        self,
        message: str | None,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message or "Request failed")
        self.message = message
        self.status_code = status_code
        self.errors = errors


class NotesAPI:
    """Thin wrapper over the REST endpoints, one method per route"""

    def __init__(self, client: httpx.AsyncClient, token: str | None = None, prefix: str = "/api") -> None:
        self.client = client
        self.token = token
        self.prefix = prefix

    def set_token(self, token: str | None) -> None:
        self.token = token

    async def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {self.token}"} if self.token else {}
        try:
            response = await self.client.request(method, f"{self.prefix}{path}", headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Request failed method=%s path=%s (%s)", method, path, e)
            raise APIError(None) from e

        try:
            body = response.json() if response.content else {}
        except ValueError:
            body = {}

        if response.is_error:
            message = body.get("message") if isinstance(body, dict) else None
            errors = body.get("errors") if isinstance(body, dict) else None
            raise APIError(message, response.status_code, errors)
        return body

    # auth

    async def register(self, name: str, email: str, password: str) -> dict[str, Any]:
        body = await self._request("POST", "/auth/register", json={"name": name, "email": email, "password": password})
        self.set_token(body["data"]["token"])
        return body

    async def login(self, email: str, password: str) -> dict[str, Any]:
        body = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        self.set_token(body["data"]["token"])
        return body

    async def me(self) -> dict[str, Any]:
        return await self._request("GET", "/auth/me")

    # notes

    async def get_notes(self, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return await self._request("GET", "/notes", params=params or {})

    async def get_note(self, note_id: int) -> dict[str, Any]:
        return await self._request("GET", f"/notes/{note_id}")

    async def create_note(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("POST", "/notes", json=data)

    async def update_note(self, note_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", f"/notes/{note_id}", json=data)

    async def delete_note(self, note_id: int) -> dict[str, Any]:
        return await self._request("DELETE", f"/notes/{note_id}")

    async def toggle_pin(self, note_id: int) -> dict[str, Any]:
        return await self._request("PATCH", f"/notes/{note_id}/pin")

    # user

    async def get_profile(self) -> dict[str, Any]:
        return await self._request("GET", "/user/profile")

    async def update_profile(self, data: dict[str, Any]) -> dict[str, Any]:
        return await self._request("PUT", "/user/profile", json=data)

    async def change_password(self, current_password: str, new_password: str) -> dict[str, Any]:
        return await self._request(
            "PUT",
            "/user/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    async def delete_account(self, password: str) -> dict[str, Any]:
        return await self._request("DELETE", "/user/account", json={"password": password})
