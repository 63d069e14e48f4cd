"""Unit tests for match highlighting."""

import pytest

from dashboard_query.search.highlight import highlight_match


@pytest.mark.unit
def test_wraps_every_occurrence_preserving_case():
    result = highlight_match("Loan against gold; LOAN top-up", "loan")

    assert result == "<mark>Loan</mark> against gold; <mark>LOAN</mark> top-up"


@pytest.mark.unit
def test_case_sensitive_only_marks_exact_case():
    result = highlight_match("Loan and loan", "loan", case_sensitive=True)

    assert result == "Loan and <mark>loan</mark>"


@pytest.mark.unit
def test_plain_style_uses_brackets():
    assert highlight_match("Rahul Sharma", "rahul", style="plain") == "[[Rahul]] Sharma"


@pytest.mark.unit
def test_regex_metacharacters_are_literal():
    assert highlight_match("Rate (p.a.) 11.5%", "(p.a.)") == "Rate <mark>(p.a.)</mark> 11.5%"
    assert highlight_match("abc", "a.c") == "abc"


@pytest.mark.unit
def test_fuzzy_only_match_is_unchanged():
    assert highlight_match("Rahul Sharma", "Rahul Sharmaa") == "Rahul Sharma"


@pytest.mark.unit
def test_empty_inputs_return_text():
    assert highlight_match("", "x") == ""
    assert highlight_match("text", "") == "text"


@pytest.mark.unit
def test_unknown_style_raises():
    with pytest.raises(ValueError, match="Unknown highlight style"):
        highlight_match("text", "t", style="ansi")
