"""Application configuration for producthub."""

from __future__ import annotations

import dataclasses
import os
from enum import StrEnum
from typing import Any

from producthub._constants import DEFAULT_API_VERSION
from producthub.exceptions import ProductHubConfigError


class Environment(StrEnum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class InitStrategy(StrEnum):
    """Where the UI layer loads page definitions from first."""

    NETWORK_FIRST = "network_first"
    CACHE_FIRST = "cache_first"
    LOCAL_FIRST = "local_first"


class IntegrationMode(StrEnum):
    """How much of the app the dynamic UI layer owns.

    ``FULL`` lets the UI layer render every screen; ``HYBRID`` mixes native
    screens (e.g. the cart) with remotely defined pages.
    """

    FULL = "full"
    HYBRID = "hybrid"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_enum(enum_cls: type[StrEnum], value: str, env_key: str) -> Any:
    try:
        return enum_cls(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ProductHubConfigError(f"{env_key}={value!r} is not one of: {allowed}") from exc


def _env_float(value: str, env_key: str) -> float:
    try:
        return float(value)
    except ValueError as exc:
        raise ProductHubConfigError(f"{env_key}={value!r} is not a number") from exc


@dataclasses.dataclass(frozen=True)
class FeatureFlags:
    """Toggles for optional integrations."""

    analytics: bool = True
    crash_reporting: bool = True
    push_notifications: bool = True
    payments: bool = True


@dataclasses.dataclass(frozen=True)
class StorefrontConfig:
    """Commerce backend (Storefront GraphQL API) settings.

    Parameters
    ----------
    store_name : str
        Shop subdomain, e.g. ``"digia-open-fashion"``.
    access_token : str
        Public storefront access token sent with every request.
    api_version : str
        Versioned API path segment.
    connect_timeout : float
        Seconds allowed for establishing a connection.
    read_timeout : float
        Seconds allowed for reading a response.
    """

    store_name: str = ""
    access_token: str = ""
    api_version: str = DEFAULT_API_VERSION
    connect_timeout: float = 10.0
    read_timeout: float = 15.0

    @property
    def endpoint(self) -> str:
        return f"https://{self.store_name}.myshopify.com/api/{self.api_version}/graphql.json"


@dataclasses.dataclass(frozen=True)
class AppConfig:
    """Application configuration.

    Parameters
    ----------
    access_key : str
        Access key for the dynamic UI service.
    environment : Environment
        Deployment environment of the UI project.
    init_strategy : InitStrategy
        Page definition loading strategy.
    integration_mode : IntegrationMode
        Full dynamic UI or hybrid native/dynamic screens.
    branch : str
        UI project branch to load pages from.
    storefront : StorefrontConfig
        Commerce backend settings.
    features : FeatureFlags
        Optional integration toggles.
    """

    access_key: str = ""
    environment: Environment = Environment.DEVELOPMENT
    init_strategy: InitStrategy = InitStrategy.NETWORK_FIRST
    integration_mode: IntegrationMode = IntegrationMode.FULL
    branch: str = "main"
    storefront: StorefrontConfig = dataclasses.field(default_factory=StorefrontConfig)
    features: FeatureFlags = dataclasses.field(default_factory=FeatureFlags)

    @property
    def is_debug(self) -> bool:
        return self.environment is Environment.DEVELOPMENT

    def environment_variables(self) -> dict[str, str]:
        """Variables exposed to remotely defined pages."""
        return {
            "accessToken": self.storefront.access_token,
            "storeName": self.storefront.store_name,
        }

    @classmethod
    def from_env(cls, **overrides: Any) -> AppConfig:
        """Create configuration from ``PRODUCTHUB_*`` environment variables.

        Explicit keyword arguments override environment values. ``storefront``
        and ``features`` overrides may be given as dicts (merged over the
        environment) or as ready-made dataclass instances (used as-is).

        Raises
        ------
        ProductHubConfigError
            When an enum or numeric variable cannot be parsed.
        """
        env = os.environ

        storefront_kwargs: dict[str, Any] = {}
        _ENV_STOREFRONT_MAP = {
            "PRODUCTHUB_STORE_NAME": "store_name",
            "PRODUCTHUB_STOREFRONT_TOKEN": "access_token",
            "PRODUCTHUB_STOREFRONT_API_VERSION": "api_version",
        }
        for env_key, field_name in _ENV_STOREFRONT_MAP.items():
            val = env.get(env_key)
            if val is not None:
                storefront_kwargs[field_name] = val
        for env_key, field_name in (
            ("PRODUCTHUB_CONNECT_TIMEOUT", "connect_timeout"),
            ("PRODUCTHUB_READ_TIMEOUT", "read_timeout"),
        ):
            val = env.get(env_key)
            if val is not None:
                storefront_kwargs[field_name] = _env_float(val, env_key)

        storefront_overrides = overrides.pop("storefront", None)
        if isinstance(storefront_overrides, dict):
            storefront_kwargs.update(storefront_overrides)
        elif isinstance(storefront_overrides, StorefrontConfig):
            storefront_kwargs = dataclasses.asdict(storefront_overrides)

        feature_kwargs: dict[str, bool] = {}
        defaults = FeatureFlags()
        for flag in dataclasses.fields(FeatureFlags):
            env_key = f"PRODUCTHUB_FEATURE_{flag.name.upper()}"
            feature_kwargs[flag.name] = _env_bool(env.get(env_key), getattr(defaults, flag.name))

        feature_overrides = overrides.pop("features", None)
        if isinstance(feature_overrides, dict):
            feature_kwargs.update(feature_overrides)
        elif isinstance(feature_overrides, FeatureFlags):
            feature_kwargs = dataclasses.asdict(feature_overrides)

        config_kwargs: dict[str, Any] = {
            "storefront": StorefrontConfig(**storefront_kwargs),
            "features": FeatureFlags(**feature_kwargs),
        }

        access_key = env.get("PRODUCTHUB_ACCESS_KEY")
        if access_key is not None:
            config_kwargs["access_key"] = access_key
        branch = env.get("PRODUCTHUB_BRANCH")
        if branch is not None:
            config_kwargs["branch"] = branch

        _ENV_ENUM_MAP: dict[str, tuple[str, type[StrEnum]]] = {
            "PRODUCTHUB_ENVIRONMENT": ("environment", Environment),
            "PRODUCTHUB_INIT_STRATEGY": ("init_strategy", InitStrategy),
            "PRODUCTHUB_INTEGRATION_MODE": ("integration_mode", IntegrationMode),
        }
        for env_key, (field_name, enum_cls) in _ENV_ENUM_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_enum(enum_cls, val, env_key)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
