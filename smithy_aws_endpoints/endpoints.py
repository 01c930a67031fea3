#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import urlsplit

from smithy_core import URI
from smithy_core.endpoints import Endpoint
from smithy_core.exceptions import SmithyError
from smithy_core.types import Document, PropertyKey, TypedProperties

from .auth import EndpointAuthScheme, convert_auth_schemes
from .exceptions import (
    InvalidEndpointURIError,
    InvalidHostPrefixError,
    MalformedRuleSetResultError,
    RuleSetError,
)
from .rulesets import EndpointResult, ErrorResult, RuleSetResult

logger = logging.getLogger(__name__)

_HOST_LABEL_RE = re.compile(r"[A-Za-z0-9-]{1,63}")


@dataclass(kw_only=True)
class ResolvedEndpoint(Endpoint):
    """An endpoint produced by a rule set, ready to be applied to a request.

    Only properties with a registered converter are present in ``properties``. See
    :py:data:`KNOWN_ENDPOINT_PROPERTIES`.
    """

    headers: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    """Headers that must be added to each request sent to the endpoint."""


AUTH_SCHEMES: PropertyKey[list[EndpointAuthScheme]] = PropertyKey(
    key="authSchemes",
    value_type=list,  # type: ignore
)
"""The auth schemes the endpoint requires, in order of preference."""


@dataclass(frozen=True)
class KnownProperty:
    """A rule set endpoint property that is converted into a typed property."""

    key: PropertyKey[Any]
    """The key the converted value is stored under."""

    converter: Callable[[Document], Any]
    """Converts the untyped rule set value into the typed value."""


KNOWN_ENDPOINT_PROPERTIES: dict[str, KnownProperty] = {
    "authSchemes": KnownProperty(AUTH_SCHEMES, convert_auth_schemes),
}
"""Endpoint properties understood by this package, keyed by rule set name.

Properties that aren't registered here are ignored.
"""


def parse_uri(value: str) -> URI:
    """Parse a URI string into a :py:class:`URI`.

    The path is kept in its raw, percent-encoded form.

    :param value: The URI to parse. It must contain a scheme and a host.
    :raises InvalidEndpointURIError: If the value can't be parsed.
    """
    try:
        parsed = urlsplit(value)
        port = parsed.port
    except ValueError as e:
        raise InvalidEndpointURIError(f"Unable to parse URI: {value}") from e

    # This will end up getting wrapped in the client.
    if not parsed.hostname:
        raise InvalidEndpointURIError(
            f"Unable to parse hostname from provided URI: {value}"
        )

    try:
        return URI(
            scheme=parsed.scheme,
            username=parsed.username,
            password=parsed.password,
            host=parsed.hostname,
            port=port,
            path=parsed.path,
            query=parsed.query or None,
            fragment=parsed.fragment or None,
        )
    except SmithyError as e:
        raise InvalidEndpointURIError(f"Unable to parse URI: {value}") from e


def resolve_rule_set_result(result: RuleSetResult) -> ResolvedEndpoint:
    """Translate a rule set result into a resolved endpoint.

    :param result: The value returned by the rule engine.
    :raises RuleSetError: If the rule set evaluated to an error.
    :raises MalformedRuleSetResultError: If the value is neither an endpoint nor an
        error.
    :raises InvalidEndpointURIError: If the endpoint URL can't be parsed.
    """
    match result:
        case EndpointResult():
            return ResolvedEndpoint(
                uri=parse_uri(result.url),
                headers=_copy_headers(result.headers),
                properties=_convert_properties(result.properties),
            )
        case ErrorResult():
            raise RuleSetError(result.message)
        case _:
            raise MalformedRuleSetResultError(
                "Rule engine returned neither an endpoint nor an error. Returned "
                f"value was: {result!r}"
            )


def _copy_headers(headers: Mapping[str, Any]) -> dict[str, tuple[str, ...]]:
    copied: dict[str, tuple[str, ...]] = {}
    for name, values in headers.items():
        if isinstance(values, str):
            raise MalformedRuleSetResultError(
                f"Expected values of endpoint header {name!r} to be a list, but "
                f"was: {values!r}"
            )
        copied[name] = tuple(values)
    return copied


def _convert_properties(properties: Mapping[str, Document]) -> TypedProperties:
    converted = TypedProperties()
    for name, value in properties.items():
        known = KNOWN_ENDPOINT_PROPERTIES.get(name)
        if known is None:
            logger.debug("Ignoring unknown endpoint property: %s", name)
            continue
        converted[known.key] = known.converter(value)
    return converted


def add_host_prefix(endpoint: ResolvedEndpoint, prefix: str) -> ResolvedEndpoint:
    """Prepend an operation's host prefix to the endpoint host.

    The prefix is prepended as-is, so it is expected to end with its own ``.``
    separator. Each dot-separated label of the prefix must be a valid host label.

    :param endpoint: The resolved endpoint.
    :param prefix: The host prefix. A blank prefix leaves the endpoint unchanged.
    :returns: A new endpoint with the prefixed host. The given endpoint is unchanged.
    :raises InvalidHostPrefixError: If a label of the prefix is not a valid host
        label.
    """
    if not prefix.strip():
        return endpoint

    for label in _split_host_labels(prefix):
        if not _HOST_LABEL_RE.fullmatch(label):
            raise InvalidHostPrefixError(
                f"The provided host prefix is not valid: the {label!r} component must "
                "be 1 to 63 alphanumeric characters or dashes.",
                label=label,
            )

    uri = replace(endpoint.uri, host=prefix + endpoint.uri.host)
    return replace(endpoint, uri=uri)


def _split_host_labels(prefix: str) -> list[str]:
    # Only the trailing separator(s) are dropped, inner empty labels stay invalid.
    labels = prefix.split(".")
    while labels and not labels[-1]:
        labels.pop()
    return labels
