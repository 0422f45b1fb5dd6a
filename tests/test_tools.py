"""
Tests for the tool handlers: validation, defaults, request templates and shaping.

The adapter is replaced by an AsyncMock so every test can assert exactly how
many outbound calls a handler attempted.
"""
from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from rollbar_mcp.results import ApiRequestSpec, Failure, FailureKind, Success
from rollbar_mcp.tools import ALL_TOOLS, TOOLS_BY_NAME


def adapter_returning(result):
    adapter = AsyncMock()
    adapter.perform_request = AsyncMock(return_value=result)
    return adapter


def sent_spec(adapter) -> ApiRequestSpec:
    adapter.perform_request.assert_awaited_once()
    return adapter.perform_request.await_args.args[0]


def test_all_five_tools_registered():
    assert sorted(TOOLS_BY_NAME) == [
        "get-deployments",
        "get-item-details",
        "get-top-items",
        "get-version",
        "list-items",
    ]


class TestValidation:
    @pytest.mark.parametrize(
        "tool_name,raw",
        [
            ("get-item-details", {}),
            ("get-version", {}),
            ("get-version", {"environment": "staging"}),
        ],
    )
    @pytest.mark.asyncio
    async def test_missing_required_parameter_never_reaches_adapter(self, tool_name, raw):
        adapter = adapter_returning(Success(payload={}))

        result = await TOOLS_BY_NAME[tool_name].run(adapter, raw)

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_PARAMETERS
        assert adapter.perform_request.await_count == 0

    @pytest.mark.parametrize(
        "tool_name,raw",
        [
            ("get-item-details", {"item_id": 0}),
            ("get-item-details", {"item_id": "12345"}),
            ("get-item-details", {"item_id": 1, "unknown": True}),
            ("get-deployments", {"limit": 0}),
            ("get-deployments", {"limit": 101}),
            ("get-top-items", {"hours": 500}),
            ("get-top-items", {"environment": ""}),
            ("get-version", {"version": "   "}),
            ("list-items", {"status": "open"}),
            ("list-items", {"level": "fatal"}),
            ("list-items", {"page": 0}),
        ],
    )
    @pytest.mark.asyncio
    async def test_bad_values_are_invalid_parameters(self, tool_name, raw):
        adapter = adapter_returning(Success(payload={}))

        result = await TOOLS_BY_NAME[tool_name].run(adapter, raw)

        assert isinstance(result, Failure)
        assert result.kind is FailureKind.INVALID_PARAMETERS
        assert result.message
        assert adapter.perform_request.await_count == 0

    @pytest.mark.asyncio
    async def test_camel_case_names_are_accepted(self):
        adapter = adapter_returning(Success(payload={"id": 12345}))

        result = await TOOLS_BY_NAME["get-item-details"].run(adapter, {"itemId": 12345})

        assert isinstance(result, Success)
        assert sent_spec(adapter).path == "/item/12345"


class TestFailurePropagation:
    @pytest.mark.parametrize("tool", ALL_TOOLS, ids=lambda tool: tool.name)
    @pytest.mark.asyncio
    async def test_adapter_failure_returned_unchanged(self, tool):
        failure = Failure(FailureKind.HTTP_ERROR, "Item not found", http_status=404)
        adapter = adapter_returning(failure)
        raw = {"item_id": 1} if tool.name == "get-item-details" else {}
        if tool.name == "get-version":
            raw = {"version": "abc123"}

        result = await tool.run(adapter, raw)

        assert result is failure


class TestGetItemDetails:
    @pytest.mark.asyncio
    async def test_example_item(self):
        adapter = adapter_returning(Success(payload={"id": 12345, "title": "Example"}))

        result = await TOOLS_BY_NAME["get-item-details"].run(adapter, {"itemId": 12345})

        assert isinstance(result, Success)
        assert result.payload["id"] == 12345
        assert result.payload["title"] == "Example"
        # Fields the API omitted are present and explicitly None.
        assert result.payload["level"] is None
        assert "total_occurrences" in result.payload

    @pytest.mark.asyncio
    async def test_shaping_is_deterministic(self):
        payload = {"id": 7, "title": "Boom", "level": "error", "counter": 3, "extra": "ignored"}
        first = await TOOLS_BY_NAME["get-item-details"].run(adapter_returning(Success(payload)), {"item_id": 7})
        second = await TOOLS_BY_NAME["get-item-details"].run(adapter_returning(Success(payload)), {"item_id": 7})

        assert json.dumps(first.payload) == json.dumps(second.payload)
        assert "extra" not in first.payload


class TestListItems:
    @pytest.mark.asyncio
    async def test_defaults_and_query_template(self):
        adapter = adapter_returning(Success(payload={"items": [], "page": 1, "total_count": 0}))

        await TOOLS_BY_NAME["list-items"].run(adapter, {})

        spec = sent_spec(adapter)
        assert spec.path == "/items"
        assert spec.method == "GET"
        assert spec.query == {
            "status": "active",
            "level": None,
            "environment": None,
            "page": 1,
            "q": None,
        }

    @pytest.mark.asyncio
    async def test_page_two_pagination_matches_fixture(self):
        fixture = {
            "items": [
                {"id": 21, "counter": 11, "title": "TypeError", "level": "error", "status": "active",
                 "environment": "production", "total_occurrences": 40, "last_occurrence_timestamp": 1700000000},
                {"id": 22, "counter": 12, "title": "KeyError", "level": "warning"},
            ],
            "page": 2,
            "total_count": 57,
        }
        adapter = adapter_returning(Success(payload=fixture))

        result = await TOOLS_BY_NAME["list-items"].run(adapter, {"page": 2, "level": "error", "query": "Error"})

        assert sent_spec(adapter).query["page"] == 2
        assert sent_spec(adapter).query["q"] == "Error"
        assert result.payload["page"] == 2
        assert result.payload["total_count"] == 57
        assert [item["id"] for item in result.payload["items"]] == [21, 22]
        assert result.payload["items"][1]["total_occurrences"] is None


class TestGetDeployments:
    @pytest.mark.asyncio
    async def test_limit_cuts_list(self):
        deploys = [{"id": n, "environment": "production", "revision": f"rev{n}"} for n in range(30)]
        adapter = adapter_returning(Success(payload={"deploys": deploys, "page": 1}))

        result = await TOOLS_BY_NAME["get-deployments"].run(adapter, {"limit": 5})

        assert sent_spec(adapter) == ApiRequestSpec(path="/deploys", query={"page": 1})
        assert result.payload["count"] == 5
        assert result.payload["page"] == 1
        assert result.payload["deployments"][0]["revision"] == "rev0"
        assert result.payload["deployments"][0]["finish_time"] is None

    @pytest.mark.asyncio
    async def test_default_limit(self):
        deploys = [{"id": n} for n in range(30)]
        adapter = adapter_returning(Success(payload={"deploys": deploys}))

        result = await TOOLS_BY_NAME["get-deployments"].run(adapter, {"page": 3})

        assert result.payload["count"] == 20
        assert result.payload["page"] == 3


class TestGetTopItems:
    @pytest.mark.asyncio
    async def test_report_shape(self):
        payload = [
            {"item": {"id": 1, "counter": 4, "title": "Timeout", "occurrences": 99}, "counts": [3, 5, 7]},
            {"item": {"id": 2, "title": "Crash"}},
        ]
        adapter = adapter_returning(Success(payload=payload))

        result = await TOOLS_BY_NAME["get-top-items"].run(adapter, {"environment": "staging"})

        spec = sent_spec(adapter)
        assert spec.path == "/reports/top_active_items"
        assert spec.query == {"environments": "staging", "hours": 24, "sort": "occurrences"}
        assert result.payload["environment"] == "staging"
        assert result.payload["hours"] == 24
        assert result.payload["count"] == 2
        assert result.payload["items"][0]["occurrences"] == 99
        assert result.payload["items"][0]["counts"] == [3, 5, 7]
        assert result.payload["items"][1]["counts"] == []


class TestGetVersion:
    @pytest.mark.asyncio
    async def test_version_is_quoted_and_stats_are_total(self):
        payload = {
            "version": "release/1.2",
            "environment": "production",
            "first_occurrence_timestamp": 1,
            "last_occurrence_timestamp": 2,
            "item_stats": {"new": {"error": 3}},
        }
        adapter = adapter_returning(Success(payload=payload))

        result = await TOOLS_BY_NAME["get-version"].run(adapter, {"version": "release/1.2"})

        spec = sent_spec(adapter)
        assert spec.path == "/versions/release%2F1.2"
        assert spec.query == {"environment": "production"}
        assert result.payload["item_stats"] == {
            "new": {"error": 3},
            "reactivated": {},
            "repeated": {},
            "resolved": {},
        }
        assert result.payload["last_occurrence_timestamp"] == 2
