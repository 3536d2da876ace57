from dataclasses import dataclass
from typing import List, Optional

import pytest

from huma.naming import generate_operation_id, generate_summary, kebab


@dataclass
class ListOutput:
    body: List[dict]


@dataclass
class OptionalListOutput:
    body: Optional[list] = None


@dataclass
class ObjectOutput:
    body: dict


@dataclass
class NoBody:
    status: int = 200


@pytest.mark.parametrize(
    "value, expected",
    [
        ("HelloWorld", "hello-world"),
        ("hello_world", "hello-world"),
        ("HTTPServer", "http-server"),
        ("noHTTPS", "no-https"),
        ("  spaced  out ", "spaced-out"),
        ("GET-/things", "get-things"),
        ("BFG9000", "bfg-9000"),
        ("", ""),
    ],
)
def test_kebab(value, expected):
    assert kebab(value) == expected


def test_convenience_operation_ids():
    assert generate_operation_id("GET", "/things", ListOutput) == "list-things"
    assert generate_operation_id("POST", "/things", NoBody) == "post-things"
    path = "/things/{thing-id}"
    assert generate_operation_id("PUT", path, NoBody) == "put-things-by-thing-id"
    assert generate_operation_id("PATCH", path, NoBody) == "patch-things-by-thing-id"
    assert generate_operation_id("DELETE", path, NoBody) == "delete-things-by-thing-id"


def test_operation_id_examples():
    assert generate_operation_id("GET", "/things/{thing-id}", ObjectOutput) == (
        "get-things-by-thing-id"
    )
    assert generate_operation_id("PUT", "/things/{thingId}/favorite", None) == (
        "put-things-by-thing-id-favorite"
    )


def test_operation_id_list_only_for_get():
    assert generate_operation_id("POST", "/things", ListOutput) == "post-things"


def test_operation_id_optional_list_and_instance():
    assert generate_operation_id("GET", "/things", OptionalListOutput) == "list-things"
    assert generate_operation_id("GET", "/things", ListOutput(body=[])) == "list-things"


def test_operation_id_no_response_type():
    assert generate_operation_id("GET", "/things", None) == "get-things"


def test_summaries():
    assert generate_summary("GET", "/things", ListOutput) == "List things"
    assert generate_summary("GET", "/things/{thing-id}", ObjectOutput) == (
        "Get things by thing ID"
    )
    assert generate_summary("PUT", "/things/{thingId}/favorite", NoBody) == (
        "Put things by thing ID favorite"
    )


def test_summary_empty_raises():
    with pytest.raises(ValueError):
        generate_summary("", "", None)