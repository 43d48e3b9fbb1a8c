from __future__ import annotations

from dataclasses import dataclass

from ..models import Role, User, UserCreate, UserUpdate
from .base import BaseClient


@dataclass
class UsersClient(BaseClient):
    module: str = "users"

    async def list_all(self) -> list[User]:
        return await self._get_list("/users", User, operation="list_all")

    async def list_active(self) -> list[User]:
        return await self._get_list("/users/active", User, operation="list_active")

    async def get(self, user_id: int) -> User:
        return await self._get_one(f"/users/{user_id}", User, operation="get")

    async def list_by_role(self, role: Role) -> list[User]:
        return await self._get_list(f"/users/role/{Role(role).value}", User, operation="list_by_role")

    async def create(self, payload: UserCreate) -> User:
        return await self._send("POST", "/users", User, operation="create", body=payload)

    async def update(self, user_id: int, payload: UserUpdate) -> User:
        return await self._send("PUT", f"/users/{user_id}", User, operation="update", body=payload)

    async def delete(self, user_id: int) -> None:
        await self._delete(f"/users/{user_id}", operation="delete")
