"""Tests for io.schemas helpers."""

import pytest

from commitment_core.io.schemas import (
    pipe_join,
    pipe_split,
    to_bool,
    to_int,
    to_int_or_none,
    to_number,
)


class TestPipeHelpers:
    def test_pipe_join_list(self):
        assert pipe_join(["Acme Corp", "Globex"]) == "Acme Corp|Globex"

    def test_pipe_join_empty(self):
        assert pipe_join([]) == ""
        assert pipe_join(None) == ""

    def test_pipe_join_skips_empty(self):
        assert pipe_join(["a", " ", None, "c"]) == "a|c"

    def test_pipe_split(self):
        assert pipe_split("Website Relaunch| Globex ") == ["Website Relaunch", "Globex"]
        assert pipe_split("") == []
        assert pipe_split(None) == []


class TestTypeCoercion:
    def test_to_number_keeps_integers(self):
        value = to_number("80")
        assert value == 80
        assert isinstance(value, int)

    def test_to_number_fraction(self):
        assert to_number("2.5") == 2.5

    def test_to_number_blank_uses_default(self):
        assert to_number("") == 0
        assert to_number(None, default=100) == 100

    def test_to_number_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_number("eighty")

    def test_to_int(self):
        assert to_int(" 5 ") == 5
        assert to_int("5.0") == 5

    def test_to_int_requires_value(self):
        with pytest.raises(ValueError, match="missing"):
            to_int("")

    @pytest.mark.parametrize("raw", ["1.5", "2.000001", "nan"])
    def test_to_int_rejects_non_integral(self, raw):
        with pytest.raises(ValueError, match="expected an integer"):
            to_int(raw)

    def test_to_int_rejects_garbage(self):
        with pytest.raises(ValueError):
            to_int("seven")

    def test_to_int_or_none(self):
        assert to_int_or_none("") is None
        assert to_int_or_none("3") == 3


class TestBool:
    @pytest.mark.parametrize("raw", ["TRUE", "true", "1", "yes"])
    def test_truthy(self, raw):
        assert to_bool(raw) is True

    def test_falsy(self):
        assert to_bool("FALSE") is False
        assert to_bool("0") is False

    def test_blank_uses_default(self):
        assert to_bool("") is False
        assert to_bool(None, default=True) is True
