from __future__ import annotations

from typing import Any, Mapping

from ..aggregation import filter_by_text_query
from ..clients import UsersClient
from ..http_client import HttpClient
from ..models import Identity, User, UserCreate, UserUpdate
from ..notifications import NotificationCenter
from ..session import SessionStore
from ..validation import validate_user
from .base import ActionResult, BaseView
from .sequencing import settle
from .view_state import ViewState

SEARCH_FIELDS = ("username", "full_name", "email")


class UsersView(BaseView):
    module = "users"
    title = "Users"
    admin_only = True

    def __init__(self, http: HttpClient, session: SessionStore, notifications: NotificationCenter) -> None:
        self.client = UsersClient(http=http)
        self.users: list[User] = []
        self.query = ""
        super().__init__(http, session, notifications)

    def has_data(self) -> bool:
        return bool(self.users)

    def set_query(self, query: str) -> list[User]:
        self.query = query
        return self.visible_users()

    def visible_users(self) -> list[User]:
        return filter_by_text_query(self.users, self.query, SEARCH_FIELDS)

    async def load(self) -> ViewState:
        sequence = self._begin("users")
        if sequence is None:
            return self.state
        (users,) = await settle(self.client.list_all())
        if not self._is_current("users", sequence):
            return self.state
        if users.error is not None:
            return self._fail(users.error)
        self.users = users.value
        return self._succeed()

    async def create(self, payload: UserCreate | Mapping[str, Any]) -> ActionResult[User]:
        async def call(identity: Identity) -> User:
            return await self.client.create(validate_user(payload))

        result = await self._run_action("create_user", call, admin_only=True, success_message="User created")
        await self._refresh_after(result)
        return result

    async def update(self, user_id: int, payload: UserUpdate | Mapping[str, Any]) -> ActionResult[User]:
        async def call(identity: Identity) -> User:
            return await self.client.update(user_id, validate_user(payload, partial=True))

        result = await self._run_action("update_user", call, admin_only=True, success_message="User updated")
        await self._refresh_after(result)
        return result

    async def delete(self, user_id: int) -> ActionResult[None]:
        async def call(identity: Identity) -> None:
            await self.client.delete(user_id)

        result = await self._run_action("delete_user", call, admin_only=True, success_message="User deleted")
        await self._refresh_after(result)
        return result
