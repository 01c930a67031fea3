#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from dataclasses import dataclass

from smithy_core.exceptions import (
    CallError,
    EndpointResolutionError,
    Fault,
    SmithyError,
)


@dataclass(kw_only=True)
class EndpointCallError(CallError, EndpointResolutionError):
    """Base exception for endpoint resolution failures surfaced to the caller.

    Endpoint resolution is deterministic for a given set of inputs, so these errors
    are never safe to retry without changing the inputs.
    """

    fault: Fault = "client"
    is_retry_safe: bool | None = False


@dataclass(kw_only=True)
class RuleSetError(EndpointCallError):
    """The endpoint rule set evaluated to an error.

    The message is the exact text produced by the rule set.
    """


@dataclass(kw_only=True)
class MalformedRuleSetResultError(EndpointCallError):
    """The rule engine returned something that is neither an endpoint nor an error."""


@dataclass(kw_only=True)
class InvalidHostPrefixError(EndpointCallError):
    """A host prefix contained a label that is not a valid host name label."""

    label: str = ""
    """The offending label."""


@dataclass(kw_only=True)
class InvalidEndpointURIError(EndpointCallError):
    """A URI could not be parsed or constructed."""


class ConfigError(SmithyError):
    """Exception type raised for invalid endpoint configuration values."""
