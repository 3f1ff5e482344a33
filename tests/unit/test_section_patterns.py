"""Unit tests for document type, subject name and section group detection."""

import pytest

from docket.contexts.classification.section_patterns import (
    GENERAL_DOCUMENT_TYPE,
    SectionGroup,
    detect_document_type,
    extract_subject_name,
    is_non_actionable,
    match_section_group,
    subject_label,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "heading, group",
    [
        ("Project Structure", SectionGroup.SETUP),
        ("Tooling", SectionGroup.SETUP),
        ("Data Model", SectionGroup.DATA_MODEL),
        ("Database Schema", SectionGroup.DATA_MODEL),
        ("UI Components", SectionGroup.UI_COMPONENTS),
        ("Screens", SectionGroup.UI_COMPONENTS),
        ("API Endpoints", SectionGroup.API_INTEGRATION),
        ("Third-party Integrations", SectionGroup.API_INTEGRATION),
        ("Core Features", SectionGroup.FEATURE),
        ("Capabilities", SectionGroup.FEATURE),
        ("Requirements", SectionGroup.REQUIREMENT),
        ("MVP Scope", SectionGroup.REQUIREMENT),
        ("Future Roadmap", SectionGroup.FUTURE),
        ("Nice to have", SectionGroup.FUTURE),
    ],
)
def test_match_section_group(heading, group):
    assert match_section_group(heading) == group


@pytest.mark.unit
def test_group_priority_order():
    """A heading matching several groups goes to the earliest one."""
    assert match_section_group("Data Architecture") == SectionGroup.SETUP
    assert match_section_group("Data API") == SectionGroup.DATA_MODEL


@pytest.mark.unit
@pytest.mark.parametrize("heading", ["Capital Planning", "Build Requirements Guide", "Team", ""])
def test_short_keywords_need_word_boundaries(heading):
    assert match_section_group(heading) in (None, SectionGroup.REQUIREMENT)
    assert match_section_group(heading) not in (SectionGroup.UI_COMPONENTS, SectionGroup.API_INTEGRATION)


@pytest.mark.unit
def test_unmatched_heading():
    assert match_section_group("Capital Planning") is None


@pytest.mark.unit
@pytest.mark.parametrize(
    "heading, expected",
    [
        ("Project Overview", True),
        ("Introduction", True),
        ("Executive Summary", True),
        ("Table of Contents", True),
        ("Version History", True),
        ("Data Model", False),
    ],
)
def test_is_non_actionable(heading, expected):
    assert is_non_actionable(heading) is expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, body, expected",
    [
        ("Product Requirements", "mvp api", "requirements-spec"),
        ("Wallet Architecture", "", "architecture-doc"),
        ("Payments API", "", "api-spec"),
        ("Payments MVP", "", "mvp-scope"),
        ("Checkout", "As a user I want to pay", "user-stories"),
        ("Getting Started", "", "onboarding-guide"),
        ("Release Notes 2.1", "", "release-notes"),
        ("Crash on login", "Steps to reproduce: open the app", "bug-report"),
        ("Team notes", "lunch plans", GENERAL_DOCUMENT_TYPE),
    ],
)
def test_detect_document_type(title, body, expected):
    assert detect_document_type(title, body) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "title, expected",
    [
        ("Design doc for the Mobile Wallet app", "Mobile Wallet"),
        ("Notes about Ledger service", "Ledger"),
        ("Mobile Wallet App Spec", "Mobile Wallet"),
        ("Payments MVP — Mobile Wallet", "Payments"),
        ('"Quoted" title', "Quoted"),
        ("", "Project"),
        ("   ", "Project"),
    ],
)
def test_extract_subject_name(title, expected):
    assert extract_subject_name(title) == expected


@pytest.mark.unit
def test_subject_label():
    assert subject_label("Mobile Wallet") == "mobile-wallet"
    assert subject_label("Acme's App!") == "acme-s-app"
