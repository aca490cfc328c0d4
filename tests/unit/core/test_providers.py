"""Tests for the data provider boundary."""

from __future__ import annotations

import json

import httpx
import pytest

from metric_tree_viz.core.exceptions import DataFetchError
from metric_tree_viz.core.providers import (
    DataProvider,
    HttpTreeProvider,
    JsonFileTreeProvider,
    parse_tree_payload,
)

TREE = {
    "name": "All-Projects",
    "values": {"state": {"value": "ACTIVE", "is_inherited": False}},
    "children": [{"name": "team", "values": {}, "children": []}],
}


def _transport(handler) -> httpx.MockTransport:
    return httpx.MockTransport(handler)


class TestParsePayload:
    def test_nested_tree(self):
        root = parse_tree_payload(TREE)

        assert root.name == "All-Projects"
        assert root.children[0].name == "team"

    def test_flat_records(self):
        root = parse_tree_payload(
            [
                {
                    "name": "All-Projects",
                    "values": {"refs push admins": {"value": "ALLOW"}},
                },
                {"name": "team", "parent": "All-Projects"},
            ]
        )

        team = root.children[0]
        assert team.metrics["refs push admins"].is_inherited is True

    def test_flat_records_honor_exclusive(self):
        root = parse_tree_payload(
            [
                {
                    "name": "All-Projects",
                    "values": {"refs push admins": {"value": "ALLOW"}},
                },
                {"name": "team", "parent": "All-Projects", "exclusive": ["refs push"]},
            ]
        )

        assert "refs push admins" not in root.children[0].metrics

    def test_deep_flat_records(self):
        records = [{"name": "p0"}] + [
            {"name": f"p{i}", "parent": f"p{i - 1}"} for i in range(1, 1500)
        ]

        root = parse_tree_payload(records)

        assert root.name == "p0"

    def test_null_is_empty_tree(self):
        assert parse_tree_payload(None) is None

    @pytest.mark.parametrize(
        "payload",
        ["text", 42, {"values": {}}, [{"name": "a", "exclusive": "refs push"}]],
    )
    def test_malformed(self, payload):
        with pytest.raises(DataFetchError):
            parse_tree_payload(payload)


@pytest.mark.asyncio
class TestHttpTreeProvider:
    async def test_fetch_with_query(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = request.url
            return httpx.Response(200, json=TREE)

        provider = HttpTreeProvider("https://host/plugin/", transport=_transport(handler))
        root = await provider.fetch_tree("team")

        assert root.name == "All-Projects"
        assert seen["url"].path == "/plugin/tree"
        assert seen["url"].params["query"] == "team"

    async def test_no_query_sends_no_param(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["params"] = dict(request.url.params)
            return httpx.Response(200, json=TREE)

        provider = HttpTreeProvider("https://host", transport=_transport(handler))
        await provider.fetch_tree(None)

        assert seen["params"] == {}

    async def test_strips_xssi_prefix(self):
        body = ")]}'\n" + json.dumps(TREE)

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=body.encode())

        provider = HttpTreeProvider("https://host", transport=_transport(handler))
        root = await provider.fetch_tree()

        assert root.name == "All-Projects"

    async def test_http_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        provider = HttpTreeProvider("https://host", transport=_transport(handler))

        with pytest.raises(DataFetchError) as exc_info:
            await provider.fetch_tree()
        assert exc_info.value.context["status"] == 500

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        provider = HttpTreeProvider("https://host", transport=_transport(handler))

        with pytest.raises(DataFetchError):
            await provider.fetch_tree()

    async def test_invalid_json(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>login</html>")

        provider = HttpTreeProvider("https://host", transport=_transport(handler))

        with pytest.raises(DataFetchError, match="invalid JSON"):
            await provider.fetch_tree()


@pytest.mark.asyncio
class TestJsonFileTreeProvider:
    async def test_reads_and_filters(self, tmp_path):
        path = tmp_path / "tree.json"
        path.write_text(json.dumps(TREE))
        provider = JsonFileTreeProvider(path)

        assert (await provider.fetch_tree()).children[0].name == "team"
        assert (await provider.fetch_tree("TEAM")).children[0].name == "team"
        assert await provider.fetch_tree("nothing") is None

    async def test_missing_file(self, tmp_path):
        provider = JsonFileTreeProvider(tmp_path / "missing.json")

        with pytest.raises(DataFetchError):
            await provider.fetch_tree()

    async def test_satisfies_protocol(self, tmp_path):
        assert isinstance(JsonFileTreeProvider(tmp_path / "x.json"), DataProvider)
        assert isinstance(HttpTreeProvider("https://host"), DataProvider)
