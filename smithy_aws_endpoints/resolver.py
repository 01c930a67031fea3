#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import logging
from collections.abc import Mapping
from typing import Any

from smithy_core.types import TypedProperties
from smithy_http.aio import HTTPRequest

from .attributes import (
    built_in_parameters,
    client_endpoint_path,
    disable_host_prefix_injection,
    endpoint_is_discovered,
)
from .endpoints import ResolvedEndpoint, add_host_prefix, resolve_rule_set_result
from .http import add_headers, set_service_endpoint
from .rulesets import RuleSetEngine

logger = logging.getLogger(__name__)


class RuleSetEndpointResolver:
    """Resolves endpoints with a rule set and points requests at them."""

    def __init__(self, engine: RuleSetEngine):
        """Initialize the resolver.

        :param engine: The rule engine to evaluate parameters with.
        """
        self._engine = engine

    def resolve_endpoint(
        self,
        attributes: TypedProperties,
        *,
        host_prefix: str | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> ResolvedEndpoint:
        """Evaluate the rule set for the current call.

        :param attributes: The attribute store of the current call.
        :param host_prefix: The operation's host prefix, if it has one. It isn't
            applied if host prefix injection is disabled.
        :param parameters: Operation-specific rule set parameters. These take
            precedence over built-in parameters of the same name.
        """
        rule_set_parameters = built_in_parameters(attributes)
        if parameters:
            rule_set_parameters.update(parameters)

        logger.debug(
            "Evaluating endpoint rule set with params: %s", rule_set_parameters
        )
        result = self._engine.evaluate(rule_set_parameters)
        logger.debug("Endpoint rule set result: %s", result)

        endpoint = resolve_rule_set_result(result)

        if host_prefix:
            if disable_host_prefix_injection(attributes):
                logger.debug("Host prefix injection is disabled, skipping prefix.")
            else:
                endpoint = add_host_prefix(endpoint, host_prefix)

        return endpoint

    def apply_endpoint(
        self,
        request: HTTPRequest,
        attributes: TypedProperties,
        endpoint: ResolvedEndpoint,
    ) -> HTTPRequest:
        """Point a marshalled request at a resolved endpoint.

        :param request: The marshalled request.
        :param attributes: The attribute store of the current call.
        :param endpoint: The endpoint to send the request to.
        """
        request = set_service_endpoint(
            request,
            client_endpoint_path=client_endpoint_path(attributes),
            endpoint=endpoint,
        )
        if endpoint.headers:
            request = add_headers(request, endpoint.headers)
        return request

    def rewrite_request(
        self,
        request: HTTPRequest,
        attributes: TypedProperties,
        *,
        host_prefix: str | None = None,
        parameters: Mapping[str, Any] | None = None,
    ) -> HTTPRequest:
        """Resolve the endpoint for a request and point the request at it.

        Requests that already target a discovered endpoint are returned unchanged.
        """
        if endpoint_is_discovered(attributes):
            logger.debug("Request targets a discovered endpoint, skipping resolution.")
            return request

        endpoint = self.resolve_endpoint(
            attributes, host_prefix=host_prefix, parameters=parameters
        )
        return self.apply_endpoint(request, attributes, endpoint)
