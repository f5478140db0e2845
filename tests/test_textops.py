import pytest

from lectures.textops import (
    clean_title,
    convert_latex_math_delimiters,
    detect_indent_unit,
    escape_dollar_signs,
    split_by_pipes_outside_math,
    unwrap_backtick_math,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("$100", r"\$100"),
        (r"\$100", r"\$100"),
        (r"\\$100", r"\\\$100"),
        (r"\\\$100", r"\\\$100"),
    ],
)
def test_escape_dollar_signs(text, expected):
    assert escape_dollar_signs(text) == expected


def test_escape_dollar_signs_is_idempotent():
    once = escape_dollar_signs("cost $5 and $$x$$")
    assert escape_dollar_signs(once) == once


@pytest.mark.parametrize(
    "title, expected",
    [
        ("1. Introduction", "Introduction"),
        ("42. The Answer", "The Answer"),
        ("I. Background", "Background"),
        ("XIV. Chapter Fourteen", "Chapter Fourteen"),
        ("Simple Title", "Simple Title"),
        ("Lecture 10 Summary", "Lecture 10 Summary"),
        ("5.  Multiple Spaces", "Multiple Spaces"),
        ("Chapter 1. Introduction", "Introduction"),
        ("Section II: Background", "Background"),
        ("5. Detailed Analysis", "Detailed Analysis"),
        ("Lecture 10 - Summary", "Lecture 10 - Summary"),
        ("Roman Numeral Section", "Roman Numeral Section"),
    ],
)
def test_clean_title(title, expected):
    assert clean_title(title) == expected


def test_arithmetic_progression_indentation():
    lines = ["- Level 0", "   - Level 1", "      - Level 2"]
    assert detect_indent_unit(lines) == 3


def test_indentation_detection_robustness():
    lines = ["- Item 1", "  - Item 1.1", "  - Item 1.2", "- Item 2", "    - Item 2.1", "    - Item 2.2"]
    assert detect_indent_unit(lines) == 2


def test_indentation_defaults_to_four_without_nested_lists():
    assert detect_indent_unit(["- a", "- b", "plain text"]) == 4


def test_indentation_counts_ordered_lists():
    lines = ["1. First", "   1. Nested", "2. Second"]
    assert detect_indent_unit(lines) == 3


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Text with `\\(x + y\\)` inline", "Text with \\(x + y\\) inline"),
        ("Text with `\\[E = mc^2\\]` display", "Text with \\[E = mc^2\\] display"),
        ("`\\(a\\)` and `\\[b\\]` together", "\\(a\\) and \\[b\\] together"),
        ("Normal text with no math", "Normal text with no math"),
        ("`\\(\\frac{x}{y}\\)` fraction", "\\(\\frac{x}{y}\\) fraction"),
    ],
)
def test_unwrap_backtick_math(text, expected):
    assert unwrap_backtick_math(text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Text \\(x + y\\) more text", "Text $x + y$ more text"),
        ("Text \\[E = mc^2\\] more text", "Text $$E = mc^2$$ more text"),
        ("\\(a\\) and \\(b\\) and \\(c\\)", "$a$ and $b$ and $c$"),
        ("Text\n\\(x^2 + y^2 = z^2\\)\nMore text", "Text\n$$x^2 + y^2 = z^2$$\nMore text"),
        ("Text\n\\(f(x) = x^2\\).\nMore", "Text\n$$f(x) = x^2.$$\nMore"),
        ("Inline \\(a\\) and display \\[b\\]", "Inline $a$ and display $$b$$"),
        ("\\(  x + y  \\)", "$$x + y$$"),
    ],
)
def test_convert_latex_math_delimiters(text, expected):
    assert convert_latex_math_delimiters(text) == expected


def test_convert_keeps_multiline_display_content():
    text = "\\[\nequation\n\\]"
    assert convert_latex_math_delimiters(text) == "$$\nequation\n$$"


def test_split_keeps_pipe_inside_inline_math():
    assert split_by_pipes_outside_math("| $a | b$ | Cell 2 |") == ["$a | b$", "Cell 2"]


def test_split_keeps_display_math_together():
    cells = split_by_pipes_outside_math("| $$E=mc^2$$ | Energy equation |")
    assert cells == ["$$E=mc^2$$", "Energy equation"]


def test_split_plain_header():
    assert split_by_pipes_outside_math("| Header 1 | Header 2 |") == ["Header 1", "Header 2"]


def test_split_drops_empty_cells():
    assert split_by_pipes_outside_math("| 1 |  | 3 |") == ["1", "3"]
    assert split_by_pipes_outside_math("|  |  |  |") == []