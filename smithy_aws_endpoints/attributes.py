#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
"""Accessors for the built-in endpoint rule set parameters.

Each accessor reads one standardized input from a per-call attribute store. None of
them mutate the store or raise when a value is absent.
"""

from dataclasses import replace
from typing import Any
from urllib.parse import urlsplit

from smithy_core import URI
from smithy_core.types import PropertyKey, TypedProperties

REGION = PropertyKey(key="aws_region", value_type=str)
"""The AWS region the client is configured for."""

DUALSTACK_ENDPOINT_ENABLED = PropertyKey(
    key="dualstack_endpoint_enabled", value_type=bool
)
"""Whether the client should use a dual-stack endpoint."""

FIPS_ENDPOINT_ENABLED = PropertyKey(key="fips_endpoint_enabled", value_type=bool)
"""Whether the client should use a FIPS endpoint."""

CLIENT_ENDPOINT: PropertyKey[str | URI] = PropertyKey(
    key="client_endpoint",
    value_type=str | URI,  # type: ignore
)
"""The endpoint the request was marshalled against.

This is the endpoint override when one is configured.
"""

ENDPOINT_OVERRIDDEN = PropertyKey(key="endpoint_overridden", value_type=bool)
"""Whether ``CLIENT_ENDPOINT`` was explicitly configured by the user."""

USE_GLOBAL_ENDPOINT = PropertyKey(key="use_global_endpoint", value_type=bool)
"""Whether the service's global endpoint should be used instead of a regional one."""

IS_DISCOVERED_ENDPOINT = PropertyKey(key="is_discovered_endpoint", value_type=bool)
"""Whether the request already targets an endpoint found by endpoint discovery."""

DISABLE_HOST_PREFIX_INJECTION = PropertyKey(
    key="disable_host_prefix_injection", value_type=bool
)
"""Whether operation host prefixes must not be added to the resolved host."""


def region_built_in(attributes: TypedProperties) -> str | None:
    return attributes.get(REGION)


def dualstack_enabled_built_in(attributes: TypedProperties) -> bool | None:
    return attributes.get(DUALSTACK_ENDPOINT_ENABLED)


def fips_enabled_built_in(attributes: TypedProperties) -> bool | None:
    return attributes.get(FIPS_ENDPOINT_ENABLED)


def use_global_endpoint_built_in(attributes: TypedProperties) -> bool | None:
    return attributes.get(USE_GLOBAL_ENDPOINT)


def endpoint_is_overridden(attributes: TypedProperties) -> bool:
    return attributes.get(ENDPOINT_OVERRIDDEN, False)


def endpoint_is_discovered(attributes: TypedProperties) -> bool:
    return attributes.get(IS_DISCOVERED_ENDPOINT, False)


def disable_host_prefix_injection(attributes: TypedProperties) -> bool:
    return attributes.get(DISABLE_HOST_PREFIX_INJECTION, False)


def endpoint_built_in(attributes: TypedProperties) -> str | None:
    """Get the endpoint override to pass to the rule set.

    The rule set's URL parser rejects URLs with a query string, so the query is
    removed. Every other component is kept exactly as configured.

    :param attributes: The attribute store of the current call.
    :returns: The override without its query, or None if the endpoint was not
        overridden.
    """
    if not endpoint_is_overridden(attributes):
        return None

    endpoint = attributes.get(CLIENT_ENDPOINT)
    if endpoint is None:
        return None

    if isinstance(endpoint, URI):
        return replace(endpoint, query=None).build()

    return _remove_query(endpoint)


def _remove_query(uri: str) -> str:
    # The query runs from the first "?" up to the fragment, if there is one.
    fragment_start = uri.find("#")
    if fragment_start == -1:
        fragment_start = len(uri)
    query_start = uri.find("?", 0, fragment_start)
    if query_start == -1:
        return uri
    return uri[:query_start] + uri[fragment_start:]


def client_endpoint_path(attributes: TypedProperties) -> str:
    """Get the raw path of the endpoint the request was marshalled against.

    :param attributes: The attribute store of the current call.
    :returns: The raw path, or an empty string if no client endpoint is stored.
    """
    endpoint = attributes.get(CLIENT_ENDPOINT)
    if endpoint is None:
        return ""
    if isinstance(endpoint, URI):
        return endpoint.path or ""
    return urlsplit(endpoint).path


def built_in_parameters(attributes: TypedProperties) -> dict[str, Any]:
    """Collect the built-in rule set parameters that have a value.

    :param attributes: The attribute store of the current call.
    :returns: A mapping of rule set parameter name to value. Absent values are
        omitted rather than passed as None.
    """
    parameters = {
        "Region": region_built_in(attributes),
        "UseDualStack": dualstack_enabled_built_in(attributes),
        "UseFIPS": fips_enabled_built_in(attributes),
        "Endpoint": endpoint_built_in(attributes),
        "UseGlobalEndpoint": use_global_endpoint_built_in(attributes),
    }
    return {name: value for name, value in parameters.items() if value is not None}
