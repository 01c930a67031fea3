#  Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#  SPDX-License-Identifier: Apache-2.0
import pytest
from smithy_core import URI
from smithy_http import Field, Fields
from smithy_http.aio import HTTPRequest

from smithy_aws_endpoints.endpoints import ResolvedEndpoint
from smithy_aws_endpoints.http import (
    add_headers,
    append_path,
    merge_headers,
    reconcile_path,
    set_service_endpoint,
    strip_path_prefix,
)


@pytest.mark.parametrize(
    "path,prefix,expected",
    [
        ("/a/c", "/a", "/c"),
        ("/a/c", "/a/", "/c"),
        ("/op", "", "/op"),
        ("/op", "/", "/op"),
        # Only the first occurrence is removed, even past a segment boundary.
        ("/a/b/a/c", "/a", "/b/a/c"),
        ("/ab/c", "/a", "b/c"),
        ("/x/a/c", "/a", "/x/c"),
        ("/c", "/a", "/c"),
    ],
)
def test_strip_path_prefix(path: str, prefix: str, expected: str) -> None:
    assert strip_path_prefix(path, prefix) == expected


@pytest.mark.parametrize(
    "base,path,expected",
    [
        ("/a/b", "/c", "/a/b/c"),
        ("/a/b", "c", "/a/b/c"),
        ("/a/b/", "/c", "/a/b/c"),
        ("/a/b/", "c", "/a/b/c"),
        ("/a/b", "", "/a/b"),
        ("/", "/c", "/c"),
        ("", "/c", "/c"),
        ("", "", ""),
        ("/a", "/c/", "/a/c/"),
    ],
)
def test_append_path(base: str, path: str, expected: str) -> None:
    assert append_path(base, path) == expected


@pytest.mark.parametrize(
    "client_path,request_path,resolved_path,expected",
    [
        # The rule set added nothing, the marshalled path is kept.
        ("", "/op", "", "/op"),
        ("/a", "/a/c", "/a", "/a/c"),
        ("/a/", "/a/c", "/a/", "/a/c"),
        # The rule set appended segments to the client endpoint path.
        ("/a", "/a/c", "/a/b", "/a/b/c"),
        ("/a/", "/a/c", "/a/b", "/a/b/c"),
        ("/a", "/a/c", "/a/b/", "/a/b/c"),
        ("/a/x", "/a/x/op/sub", "/a/x/y/z", "/a/x/y/z/op/sub"),
        # No endpoint override.
        ("", "/op", "/extra", "/extra/op"),
        ("", "/", "/extra", "/extra/"),
        ("", "", "/extra", "/extra"),
        # A root resolved path differs from an empty client path.
        ("", "/op", "/", "/op"),
        ("/a", "/a/op", "/", "/op"),
        # Percent-encoded paths are compared and joined raw.
        ("/a%20b", "/a%20b/k%2Fv", "/a%20b/c", "/a%20b/c/k%2Fv"),
    ],
)
def test_reconcile_path(
    client_path: str, request_path: str, resolved_path: str, expected: str
) -> None:
    assert reconcile_path(client_path, request_path, resolved_path) == expected


@pytest.mark.parametrize(
    "client_path,operation_path,extra",
    [
        ("", "/op", "/b"),
        ("/a", "/c", "/b"),
        ("/a/b", "/c/d", "/x/y"),
    ],
)
def test_reconcile_path_with_appended_segments(
    client_path: str, operation_path: str, extra: str
) -> None:
    result = reconcile_path(
        client_path, client_path + operation_path, client_path + extra
    )
    assert result == client_path + extra + operation_path
    assert "//" not in result


def json_request() -> HTTPRequest:
    return HTTPRequest(
        destination=URI(
            scheme="https",
            host="client.example.com",
            port=8443,
            path="/a/c",
            query="x-id=GetThing",
        ),
        method="POST",
        fields=Fields([Field(name="Content-Type", values=["application/json"])]),
        body=b"{}",
    )


def test_set_service_endpoint() -> None:
    request = json_request()
    endpoint = ResolvedEndpoint(
        uri=URI(scheme="http", host="svc.example.com", path="/a/b")
    )

    result = set_service_endpoint(request, client_endpoint_path="/a", endpoint=endpoint)

    assert result.destination == URI(
        scheme="http",
        host="svc.example.com",
        port=None,
        path="/a/b/c",
        query="x-id=GetThing",
    )
    assert result.method == "POST"
    assert result.fields == json_request().fields
    assert result.body == b"{}"
    assert request.destination == json_request().destination


def test_set_service_endpoint_uses_endpoint_port() -> None:
    endpoint = ResolvedEndpoint(uri=URI(host="svc.example.com", port=9000, path="/a"))

    result = set_service_endpoint(
        json_request(), client_endpoint_path="/a", endpoint=endpoint
    )

    assert result.destination.port == 9000
    assert result.destination.path == "/a/c"


def test_set_service_endpoint_is_idempotent() -> None:
    endpoint = ResolvedEndpoint(uri=URI(host="svc.example.com", path="/a"))

    once = set_service_endpoint(
        json_request(), client_endpoint_path="/a", endpoint=endpoint
    )
    twice = set_service_endpoint(once, client_endpoint_path="/a", endpoint=endpoint)

    assert once == twice


def test_set_service_endpoint_without_paths() -> None:
    request = HTTPRequest(
        destination=URI(host="client.example.com"), method="GET", fields=Fields()
    )
    endpoint = ResolvedEndpoint(uri=URI(host="svc.example.com"))

    result = set_service_endpoint(request, client_endpoint_path="", endpoint=endpoint)

    assert result.destination.build() == "https://svc.example.com"


def test_merge_headers_appends() -> None:
    existing = Fields([Field(name="X", values=["1"])])

    assert merge_headers(existing, {"X": ["2", "3"]}) == Fields(
        [Field(name="X", values=["1", "2", "3"])]
    )


def test_merge_headers_ignores_name_case() -> None:
    existing = Fields([Field(name="X-Amz-A", values=["1"])])

    merged = merge_headers(existing, {"x-amz-a": ["2"], "X-AMZ-A": ["3"]})

    assert len(merged) == 1
    assert merged["x-amz-a"] == Field(name="X-Amz-A", values=["1", "2", "3"])


def test_merge_headers_creates_missing() -> None:
    existing = Fields([Field(name="A", values=["1"])])

    assert merge_headers(existing, {"B": ["2", "3"]}) == Fields(
        [Field(name="A", values=["1"]), Field(name="B", values=["2", "3"])]
    )


def test_merge_headers_does_not_modify_inputs() -> None:
    existing = Fields([Field(name="X", values=["1"])])
    additional = {"X": ["2"]}

    merge_headers(existing, additional)

    assert existing == Fields([Field(name="X", values=["1"])])
    assert additional == {"X": ["2"]}


def test_merge_headers_keeps_duplicates() -> None:
    existing = Fields([Field(name="X", values=["1"])])

    assert merge_headers(existing, {"X": ["1"]})["X"].values == ["1", "1"]


def test_add_headers() -> None:
    request = json_request()

    result = add_headers(request, {"content-type": ["text/plain"], "x-amz-a": ["1"]})

    assert result.fields == Fields(
        [
            Field(name="Content-Type", values=["application/json", "text/plain"]),
            Field(name="x-amz-a", values=["1"]),
        ]
    )
    assert request.fields == json_request().fields
    assert result.destination == request.destination
