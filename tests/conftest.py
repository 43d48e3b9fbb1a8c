from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from inventory_insights.app import InventoryApp
from inventory_insights.auth_store import TokenStore
from inventory_insights.config import ClientConfig
from inventory_insights.http_client import HttpClient
from tests.inventory_helpers import FakeInventoryService, build_config, build_http


@pytest.fixture
def service() -> FakeInventoryService:
    return FakeInventoryService()


@pytest.fixture
def config() -> ClientConfig:
    return build_config()


@pytest.fixture
def http(service: FakeInventoryService, config: ClientConfig) -> HttpClient:
    return build_http(service, config)


@pytest.fixture
def token_store(tmp_path: Path) -> TokenStore:
    return TokenStore(base_dir=tmp_path)


@pytest.fixture
def app(config: ClientConfig, http: HttpClient, token_store: TokenStore) -> InventoryApp:
    return InventoryApp(config, http=http, token_store=token_store, today=lambda: date(2024, 3, 15))
