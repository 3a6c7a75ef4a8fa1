from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from producthub.config import AppConfig, FeatureFlags, StorefrontConfig
from tests.fakes import FakeStorefrontBackend


@pytest.fixture
def backend(monkeypatch: pytest.MonkeyPatch) -> FakeStorefrontBackend:
    fake = FakeStorefrontBackend()

    async def fake_post_graphql(
        _self: Any,
        query: str,
        variables: Mapping[str, Any] | None = None,
        *,
        operation_name: str | None = None,
    ) -> dict[str, Any]:
        return await fake.post_graphql(query, variables, operation_name=operation_name)

    monkeypatch.setattr("producthub._transport.GraphQLTransport.post_graphql", fake_post_graphql)
    return fake


@pytest.fixture
def storefront_config() -> StorefrontConfig:
    return StorefrontConfig(store_name="digia-open-fashion", access_token="a28935969323")


@pytest.fixture
def app_config(storefront_config: StorefrontConfig) -> AppConfig:
    return AppConfig(
        access_key="test-access-key",
        storefront=storefront_config,
        features=FeatureFlags(),
    )
