"""Tests for grm.core.structured module."""

from grm.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_raw_str,
    get_str,
    get_table,
)


class TestAsStrDict:
    def test_accepts_str_keys(self) -> None:
        assert as_str_dict({"a": 1}) == {"a": 1}

    def test_rejects_non_str_keys(self) -> None:
        assert as_str_dict({1: "a"}) is None

    def test_rejects_non_dict(self) -> None:
        assert as_str_dict([1, 2]) is None


def test_as_obj_list() -> None:
    assert as_obj_list([1, "a"]) == [1, "a"]
    assert as_obj_list({"a": 1}) is None


class TestGetters:
    def test_get_str_strips_and_drops_empty(self) -> None:
        assert get_str({"name": "  web  "}, "name") == "web"
        assert get_str({"name": "   "}, "name") is None
        assert get_str({"name": 3}, "name") is None

    def test_get_raw_str_keeps_whitespace(self) -> None:
        assert get_raw_str({"body": "line\n\n"}, "body") == "line\n\n"

    def test_get_int_rejects_bool(self) -> None:
        assert get_int({"id": 12}, "id") == 12
        assert get_int({"id": True}, "id") is None

    def test_get_bool(self) -> None:
        assert get_bool({"push": False}, "push") is False
        assert get_bool({"push": "yes"}, "push") is None

    def test_get_table_and_list(self) -> None:
        data: dict[str, object] = {"permissions": {"push": True}, "parents": [{"sha": "a"}]}
        assert get_table(data, "permissions") == {"push": True}
        assert get_list(data, "parents") == [{"sha": "a"}]
        assert get_table(data, "parents") is None
        assert get_list(data, "missing") is None
