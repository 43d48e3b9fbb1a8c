from __future__ import annotations

import asyncio

import httpx
import pytest

from inventory_insights.auth_store import TokenStore
from inventory_insights.clients import ProductsClient
from inventory_insights.events import SessionEvents, SessionInvalidated
from inventory_insights.exceptions import ActionNotPermittedError, ForbiddenError, UnauthorizedError
from inventory_insights.http_client import HttpClient, unauthorized_policy
from inventory_insights.models import Identity, Role, SessionData
from inventory_insights.session import SessionStatus, SessionStore
from inventory_insights.ui_errors import NETWORK_MESSAGE
from tests.inventory_helpers import ADMIN_PROFILE, STAFF_PROFILE, FakeInventoryService


def _session(http: HttpClient, token_store: TokenStore, reasons: list[str] | None = None) -> tuple[SessionStore, list[SessionInvalidated]]:
    events = SessionEvents()
    published: list[SessionInvalidated] = []
    events.subscribe(published.append)
    http.add_response_hook(unauthorized_policy(events))
    store = SessionStore(
        http,
        token_store,
        events,
        env_name="test",
        on_invalid_session=reasons.append if reasons is not None else None,
    )
    return store, published


def test_login_success_follows_up_with_profile(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(ADMIN_PROFILE)
    session, _ = _session(http, token_store)

    result = asyncio.run(session.login("admin", "secret"))

    assert result.success is True
    assert session.status is SessionStatus.AUTHENTICATED
    assert session.is_authenticated() is True
    assert session.is_admin() is True
    assert session.identity is not None
    assert session.identity.full_name == "Ada Admin"
    assert session.epoch == 1
    assert service.paths() == ["/auth/signin", "/auth/me"]
    assert "Authorization" not in service.requests[0].headers
    assert service.requests[1].headers["Authorization"] == "Bearer token-1"
    stored = token_store.load()
    assert stored is not None
    assert stored.token == "token-1"
    assert stored.profile is not None and stored.profile.role is Role.ADMIN


def test_staff_login_is_not_admin(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(STAFF_PROFILE)
    session, _ = _session(http, token_store)

    asyncio.run(session.login("staff", "secret"))

    assert session.is_authenticated() is True
    assert session.is_admin() is False
    with pytest.raises(ActionNotPermittedError) as excinfo:
        session.require_admin("delete_product")
    assert excinfo.value.code == "PERMISSION_DENIED"
    assert session.require_authenticated("create_transaction").username == "staff"


def test_login_invalid_credentials_persists_nothing(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.json("POST", "/auth/signin", {"error": "Unauthorized", "message": "Bad credentials"}, status=401)
    session, published = _session(http, token_store)

    result = asyncio.run(session.login("admin", "wrong"))

    assert result.success is False
    assert result.message == "Bad credentials"
    assert isinstance(result.error, UnauthorizedError)
    assert session.status is SessionStatus.UNAUTHENTICATED
    assert token_store.load() is None
    assert published == []


def test_login_network_failure_reports_reason(http: HttpClient, token_store: TokenStore) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http.client = httpx.AsyncClient(base_url="https://inventory.example.test", transport=httpx.MockTransport(handler))
    session, _ = _session(http, token_store)

    result = asyncio.run(session.login("admin", "secret"))

    assert result.success is False
    assert result.message == NETWORK_MESSAGE
    assert session.is_authenticated() is False


def test_login_rejected_profile_discards_issued_token(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.json("POST", "/auth/signin", {"token": "token-1"})
    service.json("GET", "/auth/me", {"message": "Token revoked"}, status=401)
    session, published = _session(http, token_store)

    result = asyncio.run(session.login("admin", "secret"))

    assert result.success is False
    assert session.is_authenticated() is False
    assert token_store.load() is None
    assert published == []


def test_restore_revalidates_persisted_token(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(STAFF_PROFILE, token="persisted")
    token_store.save(SessionData(token="persisted", profile=Identity(id=99, username="stale", role=Role.ADMIN)))
    session, _ = _session(http, token_store)

    restored = asyncio.run(session.restore())

    assert restored is True
    assert session.is_authenticated() is True
    # the cached profile is only a hint; the service answer wins
    assert session.is_admin() is False
    assert session.identity is not None and session.identity.username == "staff"


def test_restore_failure_discards_token(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.json("GET", "/auth/me", {"message": "expired"}, status=401)
    token_store.save(SessionData(token="expired"))
    session, published = _session(http, token_store)

    restored = asyncio.run(session.restore())

    assert restored is False
    assert session.status is SessionStatus.UNAUTHENTICATED
    assert token_store.load() is None
    assert len(service.requests) == 1
    assert published == []


def test_restore_without_token_sends_nothing(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    session, _ = _session(http, token_store)

    assert asyncio.run(session.restore()) is False
    assert service.requests == []


def test_logout_clears_everything(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(ADMIN_PROFILE)
    session, _ = _session(http, token_store)
    asyncio.run(session.login("admin", "secret"))

    session.logout()

    assert session.is_authenticated() is False
    assert session.is_admin() is False
    assert session.identity is None
    assert session.token is None
    assert token_store.load() is None


def test_any_authorization_failure_deauthenticates(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(ADMIN_PROFILE)
    service.json("GET", "/products/active", {"message": "Full authentication is required"}, status=401)
    reasons: list[str] = []
    session, published = _session(http, token_store, reasons)

    async def scenario() -> None:
        await session.login("admin", "secret")
        with pytest.raises(UnauthorizedError):
            await ProductsClient(http=http).list_active()

    asyncio.run(scenario())

    assert session.is_authenticated() is False
    assert token_store.load() is None
    assert len(published) == 1
    assert reasons == ["authorization_failure"]


def test_forbidden_also_deauthenticates(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(STAFF_PROFILE)
    service.json("GET", "/users", {"message": "Access Denied"}, status=403)
    reasons: list[str] = []
    session, _ = _session(http, token_store, reasons)

    async def scenario() -> None:
        await session.login("staff", "secret")
        with pytest.raises(ForbiddenError):
            await http.request("GET", "/users")

    asyncio.run(scenario())

    assert session.is_authenticated() is False
    assert reasons == ["authorization_failure"]


def test_stale_failure_does_not_clear_newer_session(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    service.allow_login(ADMIN_PROFILE)
    reasons: list[str] = []
    session, published = _session(http, token_store, reasons)

    async def scenario() -> None:
        release = asyncio.Event()

        async def slow_products(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(401, json={"message": "expired"})

        service.route("GET", "/products/active", slow_products)
        await session.login("admin", "secret")
        in_flight = asyncio.create_task(ProductsClient(http=http).list_active())
        await asyncio.sleep(0)

        session.logout()
        await session.login("admin", "secret")
        assert session.epoch == 2

        release.set()
        with pytest.raises(UnauthorizedError):
            await in_flight

    asyncio.run(scenario())

    assert len(published) == 1
    assert published[0].epoch == 1
    assert session.is_authenticated() is True
    assert reasons == []


def test_failure_arriving_during_login_is_ignored(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    reasons: list[str] = []
    session, published = _session(http, token_store, reasons)

    async def scenario() -> None:
        release_me = asyncio.Event()

        async def slow_me(request: httpx.Request) -> httpx.Response:
            await release_me.wait()
            return httpx.Response(200, json=ADMIN_PROFILE)

        service.json("POST", "/auth/signin", {"token": "token-1"})
        service.route("GET", "/auth/me", slow_me)
        service.json("GET", "/products/active", {"message": "expired"}, status=401)

        login = asyncio.create_task(session.login("admin", "secret"))
        await asyncio.sleep(0.01)
        assert session.status is SessionStatus.AUTHENTICATING
        with pytest.raises(UnauthorizedError):
            await ProductsClient(http=http).list_active()
        release_me.set()
        result = await login
        assert result.success is True

    asyncio.run(scenario())

    assert len(published) == 1
    assert session.is_authenticated() is True
    assert reasons == []


def test_logout_during_login_wins(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    session, _ = _session(http, token_store)

    async def scenario() -> None:
        release = asyncio.Event()

        async def slow_signin(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json={"token": "token-1"})

        service.route("POST", "/auth/signin", slow_signin)
        service.json("GET", "/auth/me", ADMIN_PROFILE)

        login = asyncio.create_task(session.login("admin", "secret"))
        await asyncio.sleep(0)
        session.logout()
        release.set()
        result = await login
        assert result.success is False
        assert result.error is not None and result.error.code == "LOGIN_SUPERSEDED"

    asyncio.run(scenario())

    assert session.is_authenticated() is False
    assert token_store.load() is None
    assert service.paths() == ["/auth/signin"]


def test_second_login_while_authenticating_is_refused(service: FakeInventoryService, http: HttpClient, token_store: TokenStore) -> None:
    session, _ = _session(http, token_store)

    async def scenario() -> None:
        release = asyncio.Event()

        async def slow_signin(request: httpx.Request) -> httpx.Response:
            await release.wait()
            return httpx.Response(200, json={"token": "token-1"})

        service.route("POST", "/auth/signin", slow_signin)
        service.json("GET", "/auth/me", ADMIN_PROFILE)

        first = asyncio.create_task(session.login("admin", "secret"))
        await asyncio.sleep(0)
        second = await session.login("admin", "secret")
        assert second.success is False
        assert second.error is not None and second.error.code == "LOGIN_IN_PROGRESS"
        release.set()
        assert (await first).success is True

    asyncio.run(scenario())

    assert session.is_authenticated() is True
    assert service.paths() == ["/auth/signin", "/auth/me"]


def test_require_authenticated_when_signed_out(http: HttpClient, token_store: TokenStore) -> None:
    session, _ = _session(http, token_store)

    with pytest.raises(ActionNotPermittedError) as excinfo:
        session.require_authenticated("create_transaction")

    assert excinfo.value.code == "AUTHENTICATION_REQUIRED"
    assert session.is_admin() is False
