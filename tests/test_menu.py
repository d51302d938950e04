import io

import pytest

from bmpfilters.menu import (
    ask_filter_option,
    ask_image_type,
    ask_main_option,
    read_choice,
)


def _reader(*tokens):
    items = iter(tokens)

    def read():
        try:
            return next(items)
        except StopIteration:
            raise EOFError from None

    return read


def test_read_choice_returns_first_valid_value():
    out = io.StringIO()
    assert read_choice(_reader("2", "3"), out, range(1, 4), "retry\n") == 2
    assert out.getvalue() == ""


def test_read_choice_retries_on_invalid_entries():
    out = io.StringIO()
    retry = "again\n"
    value = read_choice(_reader("abc", "5", "1"), out, range(1, 4), retry)
    assert value == 1
    assert out.getvalue() == retry * 2


def test_read_choice_ignores_surrounding_whitespace():
    out = io.StringIO()
    assert read_choice(_reader("  3\n"), out, (3,), "retry\n") == 3


def test_read_choice_propagates_end_of_input():
    out = io.StringIO()
    with pytest.raises(EOFError):
        read_choice(_reader("9"), out, range(1, 4), "retry\n")


def test_ask_image_type_accepts_only_8_or_24():
    out = io.StringIO()
    assert ask_image_type(_reader("12", "24"), out) == 24
    assert out.getvalue().rstrip().endswith("24")


def test_ask_image_type_accepts_8():
    assert ask_image_type(_reader("8"), io.StringIO()) == 8


def test_ask_main_option_rejects_out_of_range():
    out = io.StringIO()
    assert ask_main_option(_reader("0", "8", "7"), out) == 7
    assert out.getvalue().count(">>>") == 1


@pytest.mark.parametrize("choice", [1, 4, 7])
def test_ask_main_option_accepts_range(choice):
    assert ask_main_option(_reader(str(choice)), io.StringIO()) == choice


def test_ask_filter_option_rejects_ten():
    assert ask_filter_option(_reader("10", "9"), io.StringIO()) == 9


@pytest.mark.parametrize("choice", [1, 5, 9])
def test_ask_filter_option_accepts_range(choice):
    assert ask_filter_option(_reader(str(choice)), io.StringIO()) == choice


def test_ask_filter_option_end_of_input():
    with pytest.raises(EOFError):
        ask_filter_option(_reader("0", "-1"), io.StringIO())