#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import configparser
import os
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, ClassVar, Literal, Protocol

from smithy_core import URI
from smithy_core.types import TypedProperties

from .attributes import (
    CLIENT_ENDPOINT,
    DISABLE_HOST_PREFIX_INJECTION,
    DUALSTACK_ENDPOINT_ENABLED,
    ENDPOINT_OVERRIDDEN,
    FIPS_ENDPOINT_ENABLED,
    REGION,
    USE_GLOBAL_ENDPOINT,
)
from .exceptions import ConfigError

SOURCE_CONSTRUCTOR = "constructor"
SOURCE_ENVIRONMENT = "environment"
SOURCE_CONFIG_FILE = "config_file"
SOURCE_DEFAULT = "default"
SOURCE_IN_CODE_UPDATE = "in_code_update"

SourceType = Literal[
    "constructor",
    "environment",
    "config_file",
    "default",
    "in_code_update",
]


class EndpointConfig(Protocol):
    """A config with the settings that feed endpoint resolution."""

    region: str | None
    """The AWS region to address the request to."""

    endpoint_uri: str | URI | None
    """A static endpoint that overrides the resolved one's base."""

    use_dualstack_endpoint: bool
    """Whether to resolve a dual-stack endpoint."""

    use_fips_endpoint: bool
    """Whether to resolve a FIPS endpoint."""

    use_global_endpoint: bool
    """Whether to resolve the service's global endpoint."""

    disable_host_prefix_injection: bool
    """Whether operation host prefixes are left off the resolved host."""


class ConfigValue:
    """Configuration value with metadata about its source"""

    def __init__(self, value: Any, source: SourceType):
        self.value = value
        self.source = source

    def __repr__(self) -> str:
        return f"ConfigValue(value={self.value!r}, source={self.source!r})"


class ClientEndpointConfig:
    """Endpoint configuration with precedence-based resolution.

    Values are resolved in this order: constructor arguments, environment
    variables, the shared config file, then defaults. Constructor parameters
    default to the ``...`` sentinel so that an explicit ``None`` can be told apart
    from an argument that wasn't given.

    To add a field, add it to the constructor, add an entry to ``CONFIG_FIELDS``
    and add a property for it.
    """

    CONFIG_FIELDS: ClassVar[dict[str, dict[str, Any]]] = {
        "region": {
            "env_var": "AWS_REGION",
            "config_key": "region",
            "default": None,
            "validator": "_validate_optional_string",
        },
        "endpoint_uri": {
            "env_var": "AWS_ENDPOINT_URL",
            "config_key": "endpoint_url",
            "default": None,
            "validator": "_validate_endpoint_uri",
        },
        "use_dualstack_endpoint": {
            "env_var": "AWS_USE_DUALSTACK_ENDPOINT",
            "config_key": "use_dualstack_endpoint",
            "default": False,
            "validator": "_validate_bool",
        },
        "use_fips_endpoint": {
            "env_var": "AWS_USE_FIPS_ENDPOINT",
            "config_key": "use_fips_endpoint",
            "default": False,
            "validator": "_validate_bool",
        },
        "use_global_endpoint": {
            "default": False,
            "validator": "_validate_bool",
        },
        "disable_host_prefix_injection": {
            "default": False,
            "validator": "_validate_bool",
        },
    }

    def __init__(
        self,
        *,
        region: str | None = ...,  # type: ignore[assignment]
        endpoint_uri: str | URI | None = ...,  # type: ignore[assignment]
        use_dualstack_endpoint: bool = ...,  # type: ignore[assignment]
        use_fips_endpoint: bool = ...,  # type: ignore[assignment]
        use_global_endpoint: bool = ...,  # type: ignore[assignment]
        disable_host_prefix_injection: bool = ...,  # type: ignore[assignment]
    ):
        self._constructor_values = {
            k: v for k, v in locals().items() if k != "self" and v is not ...
        }
        self._resolved = False

    def resolve(
        self,
        *,
        environment_loader: Callable[[], Mapping[str, str]] | None = None,
        config_file_loader: Callable[[], Mapping[str, str]] | None = None,
    ) -> None:
        """Resolve configuration from all sources.

        :param environment_loader: Custom environment loader function.
        :param config_file_loader: Custom config file loader function.
        """
        if self._resolved:
            raise RuntimeError(
                "Config has already been resolved. Multiple calls to resolve() are not "
                "allowed."
            )

        env_values = (environment_loader or self._load_environment_values)()
        config_file_values = (config_file_loader or self._load_config_file_values)()

        for field_name in self.CONFIG_FIELDS:
            resolved_value = self._resolve_field(
                field_name, env_values, config_file_values
            )
            setattr(self, f"_{field_name}", resolved_value)

        self._resolved = True

    def _load_environment_values(self) -> Mapping[str, str]:
        return os.environ

    def _load_config_file_values(self) -> Mapping[str, str]:
        config_path = Path(
            os.environ.get("AWS_CONFIG_FILE", Path.home() / ".aws" / "config")
        )
        if not config_path.exists():
            return {}

        parser = configparser.ConfigParser()
        parser.read(config_path)

        profile = os.environ.get("AWS_PROFILE", "default")
        section_name = f"profile {profile}" if profile != "default" else "default"

        if section_name not in parser:
            return {}

        return dict(parser[section_name])

    def _resolve_field(
        self,
        field_name: str,
        env_values: Mapping[str, str],
        config_file_values: Mapping[str, str],
    ) -> ConfigValue:
        field_config = self.CONFIG_FIELDS[field_name]
        env_var = field_config.get("env_var")
        config_key = field_config.get("config_key")

        if field_name in self._constructor_values:
            value = self._constructor_values[field_name]
            source = SOURCE_CONSTRUCTOR
        elif env_var and env_var in env_values:
            value = env_values[env_var]
            source = SOURCE_ENVIRONMENT
        elif config_key and config_key in config_file_values:
            value = config_file_values[config_key]
            source = SOURCE_CONFIG_FILE
        else:
            value = field_config["default"]
            source = SOURCE_DEFAULT

        value = getattr(self, field_config["validator"])(value, field_name)
        return ConfigValue(value, source)

    def _validate_optional_string(self, value: Any, field_name: str) -> str | None:
        if value is not None and not isinstance(value, str):
            raise ConfigError(f"{field_name} must be str, got {type(value).__name__}")
        return value or None

    def _validate_endpoint_uri(self, value: Any, field_name: str) -> str | URI | None:
        if value is not None and not isinstance(value, str | URI):
            raise ConfigError(f"{field_name} must be a string or URI")
        return value or None

    def _validate_bool(self, value: Any, field_name: str) -> bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ConfigError(f"{field_name} must be true or false, got {value!r}")

    def get_config_value_object(self, field_name: str) -> ConfigValue:
        """Get the raw ConfigValue object for a field"""
        if not self._resolved:
            raise RuntimeError("Config must be resolved before accessing values")
        return getattr(self, f"_{field_name}")

    def to_attributes(
        self, attributes: TypedProperties | None = None
    ) -> TypedProperties:
        """Write the built-in endpoint attributes of this config.

        :param attributes: An existing attribute store to write to. A new one is
            created if not given.
        """
        return endpoint_attributes(self, attributes)

    @property
    def region(self) -> str | None:
        return self.get_config_value_object("region").value

    @region.setter
    def region(self, value: str | None) -> None:
        self._region = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def endpoint_uri(self) -> str | URI | None:
        return self.get_config_value_object("endpoint_uri").value

    @endpoint_uri.setter
    def endpoint_uri(self, value: str | URI | None) -> None:
        self._endpoint_uri = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def use_dualstack_endpoint(self) -> bool:
        return self.get_config_value_object("use_dualstack_endpoint").value

    @use_dualstack_endpoint.setter
    def use_dualstack_endpoint(self, value: bool) -> None:
        self._use_dualstack_endpoint = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def use_fips_endpoint(self) -> bool:
        return self.get_config_value_object("use_fips_endpoint").value

    @use_fips_endpoint.setter
    def use_fips_endpoint(self, value: bool) -> None:
        self._use_fips_endpoint = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def use_global_endpoint(self) -> bool:
        return self.get_config_value_object("use_global_endpoint").value

    @use_global_endpoint.setter
    def use_global_endpoint(self, value: bool) -> None:
        self._use_global_endpoint = ConfigValue(value, SOURCE_IN_CODE_UPDATE)

    @property
    def disable_host_prefix_injection(self) -> bool:
        return self.get_config_value_object("disable_host_prefix_injection").value

    @disable_host_prefix_injection.setter
    def disable_host_prefix_injection(self, value: bool) -> None:
        self._disable_host_prefix_injection = ConfigValue(
            value, SOURCE_IN_CODE_UPDATE
        )


def endpoint_attributes(
    config: EndpointConfig, attributes: TypedProperties | None = None
) -> TypedProperties:
    """Write the built-in endpoint attributes of a config to an attribute store.

    :param config: The config to read.
    :param attributes: An existing attribute store to write to. A new one is created
        if not given.
    """
    attributes = attributes if attributes is not None else TypedProperties()
    if config.region is not None:
        attributes[REGION] = config.region
    attributes[DUALSTACK_ENDPOINT_ENABLED] = config.use_dualstack_endpoint
    attributes[FIPS_ENDPOINT_ENABLED] = config.use_fips_endpoint
    attributes[USE_GLOBAL_ENDPOINT] = config.use_global_endpoint
    attributes[DISABLE_HOST_PREFIX_INJECTION] = config.disable_host_prefix_injection
    attributes[ENDPOINT_OVERRIDDEN] = config.endpoint_uri is not None
    if config.endpoint_uri is not None:
        attributes[CLIENT_ENDPOINT] = config.endpoint_uri
    return attributes
