"""Tests for response envelopes - result codec and error normalizer."""

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

import pytest
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData
from pydantic import BaseModel

from abap_adt_mcp.utils.response import (
    MAX_SAFE_INTEGER,
    error_result,
    success_result,
    to_json_value,
)
from tests.fixtures.fake_adt import decode_payload


class TestSuccessResult:

    def test_envelope_shape(self):
        result = success_result({"status": "success", "count": 3})

        assert len(result.content) == 1
        assert result.content[0].type == "text"
        assert result.isError is False
        assert json.loads(result.content[0].text) == {"status": "success", "count": 3}

    def test_unsafe_integer_encoded_as_quoted_string(self):
        big = 2**63 - 1
        result = success_result({"id": big, "nested": [{"seq": -(2**60)}]})

        assert f'"{big}"' in result.content[0].text
        assert decode_payload(result) == {"id": str(big), "nested": [{"seq": str(-(2**60))}]}
        assert result.isError is False

    def test_safe_integers_and_bools_unchanged(self):
        payload = decode_payload(success_result({"n": MAX_SAFE_INTEGER, "flag": True, "x": 1.5}))

        assert payload == {"n": MAX_SAFE_INTEGER, "flag": True, "x": 1.5}

    def test_boundary(self):
        assert to_json_value(MAX_SAFE_INTEGER) == MAX_SAFE_INTEGER
        assert to_json_value(MAX_SAFE_INTEGER + 1) == str(MAX_SAFE_INTEGER + 1)

    def test_pydantic_dataclass_enum_and_datetime(self):
        class Kind(Enum):
            PROGRAM = "PROG/P"

        class Ref(BaseModel):
            name: str
            size: int

        @dataclass
        class Lock:
            handle: str
            kind: Kind

        stamp = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        payload = decode_payload(success_result({
            "ref": Ref(name="ZDEMO", size=2**62),
            "lock": Lock(handle="H1", kind=Kind.PROGRAM),
            "at": stamp,
            "tags": ("a", "b"),
        }))

        assert payload == {
            "ref": {"name": "ZDEMO", "size": str(2**62)},
            "lock": {"handle": "H1", "kind": "PROG/P"},
            "at": "2026-01-02T03:04:05+00:00",
            "tags": ["a", "b"],
        }

    def test_non_finite_floats_become_null(self):
        result = success_result({"ratio": float("nan"), "limits": [float("inf"), -float("inf"), 0.5]})

        def reject_constant(token):
            raise ValueError(f"non-standard JSON token {token}")

        assert result.isError is False
        assert json.loads(result.content[0].text, parse_constant=reject_constant) == {
            "ratio": None,
            "limits": [None, None, 0.5],
        }

    def test_shared_references_are_not_circular(self):
        shared = {"a": 1}

        assert decode_payload(success_result([shared, shared])) == [{"a": 1}, {"a": 1}]

    def test_circular_structure_becomes_internal_error(self):
        loop = {"name": "loop"}
        loop["self"] = loop

        result = success_result(loop)

        assert result.isError is True
        assert decode_payload(result) == {"error": "Failed to serialize result", "code": INTERNAL_ERROR}

    def test_unserializable_value_becomes_internal_error(self):
        result = success_result({"handle": object()})

        assert result.isError is True
        assert decode_payload(result)["code"] == INTERNAL_ERROR


class TestErrorResult:

    def test_mcp_error_passes_through(self):
        error = McpError(ErrorData(code=INVALID_PARAMS, message="Invalid arguments: objectUrl: Field required"))

        result = error_result(error)

        assert result.isError is True
        assert decode_payload(result) == {
            "error": "Invalid arguments: objectUrl: Field required",
            "code": INVALID_PARAMS,
        }

    def test_method_not_found_code(self):
        result = error_result(McpError(ErrorData(code=METHOD_NOT_FOUND, message="Unknown tool: x")))

        assert decode_payload(result)["code"] == METHOD_NOT_FOUND

    def test_generic_exception_is_flattened(self):
        result = error_result(KeyError("LOCK_HANDLE at /internal/path.py:42"))

        payload = decode_payload(result)
        assert payload == {"error": "Internal server error", "code": INTERNAL_ERROR}
        assert "internal/path" not in result.content[0].text

    @pytest.mark.parametrize("value", ["boom", 42, None, {"detail": "x"}])
    def test_non_exception_values_are_coerced(self, value):
        result = error_result(value)

        assert result.isError is True
        assert decode_payload(result) == {"error": "Internal server error", "code": INTERNAL_ERROR}
