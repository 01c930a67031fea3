#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
from collections.abc import Mapping, Sequence
from dataclasses import replace

from smithy_http import Field, Fields
from smithy_http.aio import HTTPRequest
from smithy_http.interfaces import Fields as _Fields

from .endpoints import ResolvedEndpoint


def strip_path_prefix(path: str, prefix: str) -> str:
    """Remove the first occurrence of ``prefix`` from ``path``.

    A trailing ``/`` is removed from the prefix first, since stripping it would
    also strip the leading ``/`` of the remaining path.

    This is a textual match rather than a path segment match. Only the first
    occurrence is removed, wherever it is, so a prefix that also appears later in
    the path leaves that later occurrence intact.

    :param path: The path to remove the prefix from.
    :param prefix: The prefix to remove. An empty prefix is a no-op.
    """
    prefix = prefix.removesuffix("/")
    if not prefix:
        return path
    return path.replace(prefix, "", 1)


def append_path(base: str, path: str) -> str:
    """Append ``path`` to ``base`` with exactly one ``/`` between them.

    :param base: The leading path.
    :param path: The path to append. If empty, ``base`` is returned unchanged.
    """
    if not path:
        return base
    separator = "" if base.endswith("/") else "/"
    return f"{base}{separator}{path.removeprefix('/')}"


def reconcile_path(
    client_endpoint_path: str, request_path: str, resolved_path: str
) -> str:
    """Compute the final request path from the three path fragments.

    :param client_endpoint_path: The raw path of the endpoint the request was
        marshalled against.
    :param request_path: The raw path of the marshalled request. It starts with
        ``client_endpoint_path`` followed by the operation's path.
    :param resolved_path: The raw path of the resolved endpoint.
    """
    if resolved_path == client_endpoint_path:
        return request_path

    # The rule set added segments of its own, so only the operation's part of the
    # marshalled path is carried over.
    operation_path = strip_path_prefix(request_path, client_endpoint_path)
    return append_path(resolved_path, operation_path)


def set_service_endpoint(
    request: HTTPRequest,
    *,
    client_endpoint_path: str,
    endpoint: ResolvedEndpoint,
) -> HTTPRequest:
    """Point a marshalled request at a resolved endpoint.

    The scheme, host and port are taken from the endpoint. The path is reconciled
    with :py:func:`reconcile_path`. Everything else is kept from the request.

    :param request: The marshalled request.
    :param client_endpoint_path: The raw path of the endpoint the request was
        marshalled against.
    :param endpoint: The resolved endpoint.
    """
    uri = endpoint.uri
    previous = request.destination
    path = reconcile_path(
        client_endpoint_path=client_endpoint_path,
        request_path=previous.path or "",
        resolved_path=uri.path or "",
    )
    destination = replace(
        previous, scheme=uri.scheme, host=uri.host, port=uri.port, path=path
    )
    return replace(request, destination=destination)


def merge_headers(
    existing: _Fields, additional: Mapping[str, Sequence[str]]
) -> Fields:
    """Merge headers, appending to the values of names that already exist.

    Names are compared case-insensitively. A merged field keeps the name it already
    had. Neither argument is modified.

    :param existing: The current headers.
    :param additional: The headers to add.
    :returns: New fields where each name has its existing values followed by the
        additional ones.
    """
    merged = Fields(
        [Field(name=fld.name, values=fld.values, kind=fld.kind) for fld in existing],
        encoding=existing.encoding,
    )
    for name, values in additional.items():
        merged.extend(Fields([Field(name=name, values=values)]))
    return merged


def add_headers(
    request: HTTPRequest, headers: Mapping[str, Sequence[str]]
) -> HTTPRequest:
    """Return a copy of the request with ``headers`` merged into its fields."""
    return replace(request, fields=merge_headers(request.fields, headers))
