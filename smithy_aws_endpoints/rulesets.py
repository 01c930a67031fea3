#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from smithy_core.types import Document


@dataclass(kw_only=True, frozen=True)
class EndpointResult:
    """A rule set evaluation that produced an endpoint."""

    url: str
    """The endpoint URL as produced by the rule set."""

    headers: Mapping[str, Sequence[str]] = field(default_factory=dict)
    """Headers that must be sent with requests to the endpoint."""

    properties: Mapping[str, Document] = field(default_factory=dict)
    """Untyped endpoint properties, such as ``authSchemes``."""


@dataclass(frozen=True)
class ErrorResult:
    """A rule set evaluation that ended in an error rule."""

    message: str
    """The error text produced by the rule set."""


type RuleSetResult = EndpointResult | ErrorResult
"""The result of evaluating an endpoint rule set."""


class RuleSetEngine(Protocol):
    """Evaluates an endpoint rule set."""

    def evaluate(self, parameters: Mapping[str, Any]) -> RuleSetResult:
        """Evaluate the rule set.

        :param parameters: Rule set parameters keyed by their rule set name, for
            example ``Region`` or ``UseFIPS``.
        """
        ...
