"""Tests for grm.core.result module."""

import pytest

from grm.core.result import Err, Ok, Result


class TestOk:
    def test_carries_value(self) -> None:
        assert Ok("rc-1.0.0").value == "rc-1.0.0"

    def test_equality(self) -> None:
        assert Ok(42) == Ok(42)
        assert Ok(42) != Err(42)

    def test_is_frozen(self) -> None:
        result = Ok(1)
        with pytest.raises(AttributeError):
            result.value = 2  # type: ignore[misc]


class TestErr:
    def test_carries_error(self) -> None:
        assert Err("failed").error == "failed"

    def test_is_frozen(self) -> None:
        result = Err("failed")
        with pytest.raises(AttributeError):
            result.error = "other"  # type: ignore[misc]


def test_early_return_pattern() -> None:
    """The isinstance early-return narrows to the value."""

    def double(r: Result[int, str]) -> Result[int, str]:
        if isinstance(r, Err):
            return r
        return Ok(r.value * 2)

    assert double(Ok(2)) == Ok(4)
    assert double(Err("no")) == Err("no")


def test_pattern_matching() -> None:
    def describe(r: Result[int, str]) -> str:
        match r:
            case Ok(value):
                return f"ok {value}"
            case Err(error):
                return f"err {error}"

    assert describe(Ok(1)) == "ok 1"
    assert describe(Err("x")) == "err x"
