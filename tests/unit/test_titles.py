"""Unit tests for bullet-derived item titles."""

import pytest

from docket.contexts.classification.titles import (
    MAX_BULLET_TITLE_LENGTH,
    clean_bullet_text,
    make_item_title,
    starts_with_action_verb,
    truncate_at_word,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  -   build   the   thing ", "build the thing"),
        ("* starred", "starred"),
        ("• dotted", "dotted"),
        ("1. first step", "first step"),
        ("2) second step", "second step"),
        ("1.5x faster sync", "1.5x faster sync"),
        ("", ""),
    ],
)
def test_clean_bullet_text(raw, expected):
    assert clean_bullet_text(raw) == expected


@pytest.mark.unit
def test_truncate_at_word_boundary():
    assert truncate_at_word("Support exporting invoices to PDF", 20) == "Support exporting..."


@pytest.mark.unit
def test_truncate_short_text_unchanged():
    assert truncate_at_word("Short", 20) == "Short"


@pytest.mark.unit
def test_truncate_single_long_word():
    assert truncate_at_word("a" * 100, 10) == "aaaaaaa..."


@pytest.mark.unit
def test_truncate_respects_limit():
    text = " ".join(["word"] * 50)
    truncated = truncate_at_word(text)

    assert len(truncated) <= MAX_BULLET_TITLE_LENGTH
    assert truncated.endswith("...")


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("- user can reset password via email", "Implement user can reset password via email"),
        ("* build the onboarding wizard", "Build the onboarding wizard"),
        ("Export to CSV", "Implement export to CSV"),
        ("API rate limiting", "Implement API rate limiting"),
        ("set up alerts", "Set up alerts"),
    ],
)
def test_make_item_title(raw, expected):
    assert make_item_title(raw) == expected


@pytest.mark.unit
def test_make_item_title_empty():
    assert make_item_title("  -  ") == ""


@pytest.mark.unit
def test_starts_with_action_verb():
    assert starts_with_action_verb("Validate inputs")
    assert starts_with_action_verb("fix: crash on load")
    assert not starts_with_action_verb("Wallet balance")
