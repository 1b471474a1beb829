"""Unit tests for pasted job-text cleanup."""

import pytest

from jobtracker.utils.text_cleanup import clean_term, extract_bullet_prefix, normalize_text


@pytest.mark.unit
def test_normalize_text_flattens_pasted_posting():
    raw = "Acme&nbsp;Corp\u2019s team<br/>\n\n\n\n  We\u2014build   things\u200b  "
    assert normalize_text(raw) == "Acme Corp's team\n\nWe-build things"


@pytest.mark.unit
@pytest.mark.parametrize(
    "text, expected",
    [
        ("• Python", "Python"),
        ("  - Go", "Go"),
        ("3) Kubernetes", "Kubernetes"),
        ("C++", "C++"),
    ],
)
def test_extract_bullet_prefix(text, expected):
    assert extract_bullet_prefix(text) == expected


@pytest.mark.unit
def test_clean_term_strips_quotes_and_trailing_punctuation():
    assert clean_term('- "PostgreSQL",') == "PostgreSQL"
    assert clean_term("Node.js") == "Node.js"
    assert clean_term("   ") == ""
