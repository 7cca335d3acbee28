"""Tests for the coerce_json_param helper in types.py."""

from __future__ import annotations

from biblioart_mcp.types import coerce_json_param


class TestCoerceJsonParam:
    def test_parses_json_list_of_heights(self):
        """GIVEN scene heights sent as a JSON string,
        WHEN coerce_json_param is called with expected_type=list,
        THEN it returns the parsed list.
        """
        assert coerce_json_param("[800, 1200.5]", list) == [800, 1200.5]

    def test_passes_list_through(self):
        original = [1.0, 2.0]
        assert coerce_json_param(original, list) is original

    def test_none_passes_through(self):
        assert coerce_json_param(None, list) is None

    def test_wrong_json_type_is_returned_unchanged(self):
        assert coerce_json_param('{"a": 1}', list) == '{"a": 1}'

    def test_invalid_json_is_returned_unchanged(self):
        assert coerce_json_param("tall", list) == "tall"
