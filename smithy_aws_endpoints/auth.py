#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from smithy_core.types import Document

from .exceptions import MalformedRuleSetResultError

logger = logging.getLogger(__name__)


@dataclass(kw_only=True, frozen=True)
class SigV4AuthScheme:
    """SigV4 signing settings required by a resolved endpoint."""

    signing_name: str | None = None
    """The service name to sign with."""

    signing_region: str | None = None
    """The region to sign for."""

    disable_double_encoding: bool | None = None
    """Whether the path must only be encoded once when signing."""


@dataclass(kw_only=True, frozen=True)
class SigV4aAuthScheme:
    """SigV4a signing settings required by a resolved endpoint."""

    signing_name: str | None = None
    """The service name to sign with."""

    signing_region_set: tuple[str, ...] = ()
    """The set of regions the signature is valid for."""

    disable_double_encoding: bool | None = None
    """Whether the path must only be encoded once when signing."""


type EndpointAuthScheme = SigV4AuthScheme | SigV4aAuthScheme


def convert_auth_schemes(value: Document) -> list[EndpointAuthScheme]:
    """Convert the ``authSchemes`` endpoint property into typed auth schemes.

    Schemes with an unrecognized name are skipped so that newer rule sets keep
    working.

    :param value: The raw property value, a list of scheme objects.
    :raises MalformedRuleSetResultError: If the property does not have the expected
        structure.
    """
    if isinstance(value, str) or not isinstance(value, Sequence):
        raise MalformedRuleSetResultError(
            f"Expected authSchemes to be a list, but was: {value!r}"
        )

    schemes: list[EndpointAuthScheme] = []
    for scheme in value:
        if not isinstance(scheme, Mapping):
            raise MalformedRuleSetResultError(
                f"Expected auth scheme to be an object, but was: {scheme!r}"
            )
        name = _expect(scheme, "name", str, required=True)
        match name:
            case "sigv4":
                schemes.append(
                    SigV4AuthScheme(
                        signing_name=_expect(scheme, "signingName", str),
                        signing_region=_expect(scheme, "signingRegion", str),
                        disable_double_encoding=_expect(
                            scheme, "disableDoubleEncoding", bool
                        ),
                    )
                )
            case "sigv4a":
                region_set = scheme.get("signingRegionSet") or []
                if (
                    isinstance(region_set, str)
                    or not isinstance(region_set, Sequence)
                    or not all(isinstance(region, str) for region in region_set)
                ):
                    raise MalformedRuleSetResultError(
                        f"Expected signingRegionSet to be a list of strings, but was: "
                        f"{region_set!r}"
                    )
                schemes.append(
                    SigV4aAuthScheme(
                        signing_name=_expect(scheme, "signingName", str),
                        signing_region_set=tuple(region_set),
                        disable_double_encoding=_expect(
                            scheme, "disableDoubleEncoding", bool
                        ),
                    )
                )
            case _:
                logger.debug("Ignoring unknown auth scheme: %s", name)
    return schemes


def _expect[T](
    scheme: Mapping[str, Any], key: str, expected: type[T], required: bool = False
) -> T | None:
    value = scheme.get(key)
    if value is None:
        if required:
            raise MalformedRuleSetResultError(
                f"Auth scheme is missing required member {key!r}: {scheme!r}"
            )
        return None
    if not isinstance(value, expected):
        raise MalformedRuleSetResultError(
            f"Expected auth scheme member {key!r} to be {expected.__name__}, but was: "
            f"{value!r}"
        )
    return value
