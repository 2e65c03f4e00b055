"""Tests for plugin usage aggregation."""

from __future__ import annotations

import json
from http.client import BadStatusLine
from unittest.mock import MagicMock, patch

import pytest

from epexplorer.core.models import PluginUsage, SortKey
from epexplorer.explorer.aggregator import collect, merge_usages, parse_usage, parse_usages
from epexplorer.marketplace.base import MarketplaceError
from epexplorer.marketplace.client import HttpMarketplaceSource


class TestParseUsage:
    """Tests for parse_usage."""

    def test_full_record(self, payloads) -> None:
        record = payloads.record(
            1234, name="Widget", downloads=50, source="https://github.com/acme/widget",
            updated=1700000000000, verified=True,
        )
        usage = parse_usage(record)
        assert usage == PluginUsage(
            id="1234",
            name="Widget",
            downloads=50,
            source_code_url="https://github.com/acme/widget",
            verified=True,
            last_update_date=1700000000000,
        )

    def test_defaults_for_null_fields(self, payloads) -> None:
        record = payloads.record("p", name=None, downloads=None, source=None, updated=None)
        usage = parse_usage(record)
        assert usage is not None
        assert usage.name == "Unknown"
        assert usage.downloads == 0
        assert usage.source_code_url == ""
        assert usage.last_update_date == 0
        assert usage.verified is False

    def test_null_organization_is_unverified(self, payloads) -> None:
        record = payloads.record("p")
        record["organization"] = None
        assert parse_usage(record).verified is False

    def test_missing_id_is_skipped(self, payloads) -> None:
        assert parse_usage(payloads.record(None)) is None

    def test_invalid_downloads_raises(self, payloads) -> None:
        with pytest.raises(MarketplaceError):
            parse_usage(payloads.record("p", downloads="many"))

    def test_non_object_raises(self) -> None:
        with pytest.raises(MarketplaceError):
            parse_usage(["p"])


class TestParseUsages:
    """Tests for parse_usages."""

    def test_reads_nested_plugins(self, payloads) -> None:
        payload = payloads.plugins([payloads.record("a"), payloads.record("b")])
        assert [u.id for u in parse_usages(payload)] == ["a", "b"]

    def test_missing_data_gives_no_usages(self) -> None:
        assert parse_usages({"errors": [{"message": "bad query"}]}) == []

    def test_null_plugins_gives_no_usages(self) -> None:
        assert parse_usages({"data": {"plugins": {"plugins": None}}}) == []

    def test_non_object_response_raises(self) -> None:
        with pytest.raises(MarketplaceError):
            parse_usages([])


class TestMergeUsages:
    """Tests for merge_usages."""

    def test_first_occurrence_wins(self, usage_factory) -> None:
        first = usage_factory("b", downloads=50, updated=1)
        second = usage_factory("b", downloads=50, updated=99)
        merged = merge_usages([first], [second])
        assert merged == [first]

    def test_drops_empty_source(self, usage_factory) -> None:
        merged = merge_usages([usage_factory("a", source=""), usage_factory("b")])
        assert [u.id for u in merged] == ["b"]


class TestCollect:
    """Tests for collect."""

    def test_merges_both_queries_in_order(self, fake_source_class, payloads) -> None:
        source = fake_source_class(usages={
            SortKey.DOWNLOADS: payloads.plugins([
                payloads.record("A", downloads=100, updated=1),
                payloads.record("B", downloads=50, updated=2),
            ]),
            SortKey.UPDATE_DATE: payloads.plugins([
                payloads.record("B", downloads=50, updated=9),
                payloads.record("C", downloads=10, updated=3),
            ]),
        })

        pool = collect(source, "com.intellij.completion.contributor")

        assert [u.id for u in pool] == ["A", "B", "C"]
        assert pool[1].last_update_date == 2

    def test_issues_downloads_then_update_queries(self, fake_source_class) -> None:
        source = fake_source_class()
        collect(source, "com.intellij.x")
        assert source.usage_calls == [
            ("com.intellij.x", SortKey.DOWNLOADS),
            ("com.intellij.x", SortKey.UPDATE_DATE),
        ]

    def test_skips_plugins_without_source(self, fake_source_class, payloads) -> None:
        source = fake_source_class(usages={
            SortKey.DOWNLOADS: payloads.plugins([
                payloads.record("A", source=""),
                payloads.record("B", source=None),
                payloads.record("C"),
            ]),
        })
        assert [u.id for u in collect(source, "x")] == ["C"]

    def test_failed_first_query_keeps_second(
        self, fake_source_class, payloads, failing_error
    ) -> None:
        source = fake_source_class(usages={
            SortKey.DOWNLOADS: failing_error,
            SortKey.UPDATE_DATE: payloads.plugins([payloads.record("C")]),
        })
        assert [u.id for u in collect(source, "x")] == ["C"]

    def test_malformed_second_query_keeps_first(self, fake_source_class, payloads) -> None:
        source = fake_source_class(usages={
            SortKey.DOWNLOADS: payloads.plugins([payloads.record("A")]),
            SortKey.UPDATE_DATE: payloads.plugins([payloads.record("B"), "garbage"]),
        })
        assert [u.id for u in collect(source, "x")] == ["A"]

    def test_both_queries_failing_gives_empty_pool(
        self, fake_source_class, failing_error
    ) -> None:
        source = fake_source_class(usages={
            SortKey.DOWNLOADS: failing_error,
            SortKey.UPDATE_DATE: failing_error,
        })
        assert collect(source, "x") == []


class TestCollectOverHttp:
    """collect with the HTTP source and a patched urlopen."""

    def test_malformed_first_response_keeps_second_query(self, payloads) -> None:
        body = json.dumps(payloads.plugins([
            payloads.record("C", name="C", source="https://github.com/acme/c"),
        ])).encode()
        response = MagicMock()
        response.status = 200
        response.read.side_effect = [body, b""]
        response.__enter__.return_value = response
        response.__exit__.return_value = False

        with patch(
            "epexplorer.marketplace.client.urlopen",
            side_effect=[BadStatusLine("garbage"), response],
        ) as urlopen:
            pool = collect(HttpMarketplaceSource(), "x")

        assert [u.id for u in pool] == ["C"]
        assert urlopen.call_count == 2
