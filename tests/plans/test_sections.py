"""Tests for metadata section parsing."""

import pytest

from ralph_plan.plans.models import Risk
from ralph_plan.plans.sections import (
    SectionMode,
    parse_metadata_sections,
    parse_risk_line,
    section_mode_for_header,
)

pytestmark = pytest.mark.unit


class TestParseMetadataSections:
    """Tests for parse_metadata_sections()."""

    def test_overview_fields(self) -> None:
        content = """## Overview
Title: Checkout Flow
Summary: Let users pay for orders
Effort: 2 weeks
Approach: Backend first
"""
        metadata = parse_metadata_sections(content).metadata

        assert metadata.title == "Checkout Flow"
        assert metadata.summary == "Let users pay for orders"
        assert metadata.estimated_effort == "2 weeks"
        assert metadata.approach == "Backend first"

    def test_field_synonyms(self) -> None:
        content = "# Project Info\nName: Alpha\nDescription: The alpha build\nStrategy: Iterate"
        metadata = parse_metadata_sections(content).metadata

        assert metadata.title == "Alpha"
        assert metadata.summary == "The alpha build"
        assert metadata.approach == "Iterate"

    def test_first_match_wins(self) -> None:
        content = "## Metadata\nTitle: First\nTitle: Second"
        assert parse_metadata_sections(content).metadata.title == "First"

    def test_quoted_values(self) -> None:
        content = '## Metadata\nTitle: "Quoted Title"'
        assert parse_metadata_sections(content).metadata.title == "Quoted Title"

    def test_assumptions(self) -> None:
        content = """## Assumptions
- Database is available
* Users have accounts
  with verified email
"""
        metadata = parse_metadata_sections(content).metadata
        assert metadata.assumptions == [
            "Database is available",
            "Users have accounts with verified email",
        ]

    def test_checklist_items_are_not_assumptions(self) -> None:
        content = "## Assumptions\n- [ ] Not an assumption\n- Real assumption"
        metadata = parse_metadata_sections(content).metadata
        assert metadata.assumptions == ["Real assumption"]

    def test_risks(self) -> None:
        content = """## Risks
- API instability (likelihood: H, impact: M, mitigation: add retries)
- Scope creep
"""
        metadata = parse_metadata_sections(content).metadata
        assert metadata.risks == [
            Risk(risk="API instability", likelihood="H", impact="M", mitigation="add retries"),
            Risk(risk="Scope creep"),
        ]

    def test_other_header_ends_section(self) -> None:
        content = "## Assumptions\n- Kept\n## Backend\n- Not an assumption"
        metadata = parse_metadata_sections(content).metadata
        assert metadata.assumptions == ["Kept"]

    def test_subheadings_stay_in_section(self) -> None:
        """Level 3+ headers inside a section do not end it."""
        content = """## Risks
### Technical
- Schema drift
## Overview
### Details
Title: T
## Assumptions
#### Infrastructure
- Redis is available
"""
        metadata = parse_metadata_sections(content).metadata

        assert metadata.risks == [Risk(risk="Schema drift")]
        assert metadata.title == "T"
        assert metadata.assumptions == ["Redis is available"]

    def test_tasks_header_ends_section(self) -> None:
        content = "## Overview\nTitle: T\n## Tasks\nTitle: ignored\n- [ ] Task"
        metadata = parse_metadata_sections(content).metadata
        assert metadata.title == "T"

    def test_fenced_code_is_skipped(self) -> None:
        content = "## Assumptions\n```\n- inside code\n```\n- outside code"
        metadata = parse_metadata_sections(content).metadata
        assert metadata.assumptions == ["outside code"]

    def test_no_sections(self) -> None:
        result = parse_metadata_sections("- [ ] Just a task")
        assert result.metadata.is_empty()
        assert result.warnings == []

    def test_present_fields(self) -> None:
        metadata = parse_metadata_sections("## Overview\nSummary: S").metadata
        assert metadata.present_fields() == {"summary": "S"}


class TestParseRiskLine:
    """Tests for parse_risk_line()."""

    def test_plain_risk(self) -> None:
        assert parse_risk_line("Vendor delay") == Risk(
            risk="Vendor delay", likelihood="M", impact="M", mitigation=""
        )

    def test_structured_without_parentheses(self) -> None:
        risk = parse_risk_line("Data loss - likelihood: low, impact: high")
        assert risk == Risk(risk="Data loss", likelihood="L", impact="H", mitigation="")

    def test_unknown_levels_default_to_medium(self) -> None:
        risk = parse_risk_line("Outage (likelihood: sometimes, impact: H)")
        assert risk.likelihood == "M"
        assert risk.impact == "H"

    def test_mitigation_alone_is_not_structured(self) -> None:
        """Without likelihood or impact the whole text is the risk."""
        text = "Flaky tests (mitigation: retry)"
        assert parse_risk_line(text) == Risk(risk=text)


class TestSectionModeForHeader:
    """Tests for section_mode_for_header()."""

    @pytest.mark.parametrize(
        ("header", "mode"),
        [
            ("# Metadata", SectionMode.METADATA),
            ("## Overview", SectionMode.METADATA),
            ("## Project Info", SectionMode.METADATA),
            ("## Assumptions", SectionMode.ASSUMPTIONS),
            ("## Risks", SectionMode.RISKS),
            ("## Tasks", SectionMode.NONE),
            ("## Plan", SectionMode.NONE),
            ("### Risks", SectionMode.NONE),
            ("## Backend", SectionMode.NONE),
        ],
    )
    def test_modes(self, header: str, mode: SectionMode) -> None:
        assert section_mode_for_header(header) is mode
