"""文本规范化测试."""

import pytest

from pdf_explainer.data.text_normalizer import build_normalized_view, fold_case, normalize_text


SAMPLES = [
    "",
    "   ",
    "plain text",
    "  leading and trailing  ",
    "line one\nline two\r\n\tline three",
    "non breaking spaces",
    "He said “Hello there” and ‘goodbye’.",
    "„low“ and ‚single‛ quotes",
    "Straße İstanbul ÆON",
]


def test_collapses_whitespace_and_trims():
    """测试空白折叠与首尾去空白."""
    assert normalize_text("  The   quick\n\nbrown\tfox  ") == "The quick brown fox"


def test_unifies_curly_quotes():
    """测试弯引号统一为直引号."""
    assert normalize_text("“Hello” ‘world’") == "\"Hello\" 'world'"
    assert normalize_text("„low‟ ‚single‛") == "\"low\" 'single'"


def test_preserves_case():
    """测试规范化不改变大小写."""
    assert normalize_text("Mixed CASE Text") == "Mixed CASE Text"


def test_empty_input():
    """测试空输入."""
    assert normalize_text("") == ""
    assert normalize_text(None) == ""
    assert build_normalized_view("").text == ""
    assert build_normalized_view("").offsets == ()


@pytest.mark.parametrize("raw", SAMPLES)
def test_normalize_is_idempotent(raw):
    """测试规范化幂等."""
    once = normalize_text(raw)
    assert normalize_text(once) == once


@pytest.mark.parametrize("raw", SAMPLES)
def test_view_matches_normalize_text(raw):
    """测试带偏移映射的视图与 normalize_text 结果一致."""
    view = build_normalized_view(raw)
    assert view.text == normalize_text(raw)
    assert len(view.offsets) == len(view.text)


@pytest.mark.parametrize("raw", SAMPLES)
def test_offsets_point_back_to_original(raw):
    """测试每个规范化字符都能映射回原文中的对应字符."""
    view = build_normalized_view(raw)
    for i, char in enumerate(view.text):
        original = raw[view.offsets[i]]
        if char == " ":
            assert original.isspace()
        else:
            assert normalize_text(original) == char
    assert list(view.offsets) == sorted(view.offsets)


def test_original_span_covers_collapsed_whitespace():
    """测试规范化区间映射回原文时包含被折叠的空白."""
    raw = "Intro.\n\nThe    important\nclaim.  End."
    view = build_normalized_view(raw)
    index = view.text.find("The important claim.")
    start, end = view.original_span(index, index + len("The important claim."))
    assert raw[start:end] == "The    important\nclaim."


def test_original_span_out_of_range():
    """测试越界区间返回 None."""
    view = build_normalized_view("abc def")
    assert view.original_span(0, 100) is None
    assert view.original_span(3, 3) is None
    assert view.original_span(-1, 2) is None


def test_fold_case_preserves_length():
    """测试大小写折叠保持长度不变."""
    text = "Straße İstanbul ÆON"
    folded = fold_case(text)
    assert len(folded) == len(text)
    assert folded == "straße İstanbul æon"
    assert fold_case("HELLO") == "hello"
