"""Endpoint wrappers: one coroutine per API operation, returning decoded JSON."""

from __future__ import annotations

from typing import Optional

from client.http import ApiClient


class AuthService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def register(self, name: str, email: str, password: str) -> dict:
        """Returns ``{"user": {...}, "token": "..."}``."""
        return await self.api.post(
            "/users/register",
            json={"name": name, "email": email, "password": password},
            report_unauthorized=False,
        )

    async def login(self, email: str, password: str) -> dict:
        """Returns ``{"user": {...}, "token": "..."}``."""
        return await self.api.post(
            "/users/login",
            json={"email": email, "password": password},
            report_unauthorized=False,
        )

    async def get_profile(self) -> dict:
        return await self.api.get("/users/profile")

    async def update_profile(self, fields: dict) -> dict:
        return await self.api.put("/users/profile", json=fields)

    async def logout(self, token: Optional[str] = None) -> dict:
        """Revoke ``token`` (defaults to the stored one) on the server."""
        return await self.api.post(
            "/users/logout", token=token, report_unauthorized=False
        )


class BugService:
    def __init__(self, api: ApiClient):
        self.api = api

    async def get_bugs(self) -> list:
        return await self.api.get("/bugs")

    async def get_bug(self, bug_id: str) -> dict:
        return await self.api.get(f"/bugs/{bug_id}")

    async def create_bug(self, fields: dict) -> dict:
        return await self.api.post("/bugs", json=fields)

    async def update_bug(self, bug_id: str, fields: dict) -> dict:
        """Partial update; only the keys in ``fields`` change."""
        return await self.api.put(f"/bugs/{bug_id}", json=fields)

    async def delete_bug(self, bug_id: str) -> dict:
        return await self.api.delete(f"/bugs/{bug_id}")
