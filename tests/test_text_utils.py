from search_agent.text_utils import truncate_content


def test_short_text_unchanged():
    assert truncate_content("hello", 10) == "hello"


def test_text_at_limit_unchanged():
    assert truncate_content("a" * 500) == "a" * 500


def test_long_text_cut_exactly_and_marked():
    out = truncate_content("b" * 501)
    assert out == "b" * 500 + "..."
    assert len(out) == 503


def test_custom_limit():
    assert truncate_content("abcdef", 3) == "abc..."


def test_empty_text():
    assert truncate_content("", 5) == ""
