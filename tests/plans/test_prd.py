"""Tests for the PRD JSON envelope and PRD file helpers."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from ralph_plan.plans.models import PlanMetadata, Risk, format_timestamp
from ralph_plan.plans.prd import (
    is_generated_prd,
    is_markdown_path,
    markdown_to_prd_json,
    normalize_prd_items,
    parse_prd_metadata,
    resolve_plan_target,
)

pytestmark = pytest.mark.unit


class TestMarkdownToPrdJson:
    """Tests for markdown_to_prd_json()."""

    def test_structured_plan(self) -> None:
        content = "---\ntitle: Test Project\n---\n# Tasks\n\n- [ ] First task\n- [x] Completed task"
        result = markdown_to_prd_json(content, source_file="plan.md")
        prd = json.loads(result.json)

        assert prd["metadata"]["generated"] is True
        assert prd["metadata"]["title"] == "Test Project"
        assert prd["metadata"]["sourceFile"] == "plan.md"
        assert prd["metadata"]["totalTasks"] == 2
        assert [item["passes"] for item in prd["items"]] == [False, True]
        assert result.warnings == []

    def test_simple_plan_gets_default_metadata(self, simple_plan: str) -> None:
        prd = json.loads(markdown_to_prd_json(simple_plan).json)

        assert prd["metadata"]["generated"] is True
        assert prd["metadata"]["generator"] == "ralph-markdown-parser"
        assert prd["metadata"]["totalTasks"] == 3
        assert "title" not in prd["metadata"]
        assert prd["items"][0] == {
            "category": "functional",
            "description": "First task",
            "passes": False,
        }

    def test_camel_case_fields(self, structured_plan: str) -> None:
        prd = json.loads(markdown_to_prd_json(structured_plan).json)

        assert prd["metadata"]["estimatedEffort"] == "3-5 days"
        assert "createdAt" in prd["metadata"]
        assert prd["items"][0]["acceptanceCriteria"] == [
            "Install dependencies",
            "Add environment variables",
        ]

    def test_created_at_format(self) -> None:
        prd = json.loads(markdown_to_prd_json("- [ ] t").json)
        created_at = prd["metadata"]["createdAt"]
        assert created_at.endswith("Z")
        assert len(created_at) == len("2026-01-01T00:00:00.000Z")

    def test_pretty_printed(self) -> None:
        result = markdown_to_prd_json("- [ ] t", indent=4)
        assert '\n    "metadata": {' in result.json

    def test_unicode_is_not_escaped(self) -> None:
        result = markdown_to_prd_json("- [ ] Grüße senden")
        assert "Grüße senden" in result.json

    def test_custom_generator(self) -> None:
        prd = json.loads(markdown_to_prd_json("- [ ] t", generator="my-tool").json)
        assert prd["metadata"]["generator"] == "my-tool"

    def test_empty_content(self) -> None:
        prd = json.loads(markdown_to_prd_json("").json)
        assert prd["items"] == []
        assert prd["metadata"]["totalTasks"] == 0


class TestPrdMetadata:
    """Tests for reading metadata back from PRD JSON."""

    def test_is_generated_prd(self) -> None:
        assert is_generated_prd(markdown_to_prd_json("- [ ] t").json)
        assert not is_generated_prd('{"metadata": {"generated": false, "generator": "x"}}')
        assert not is_generated_prd('{"metadata": {"generated": true, "generator": ""}}')
        assert not is_generated_prd('{"items": []}')
        assert not is_generated_prd("- [ ] markdown")
        assert not is_generated_prd("{not json")

    def test_parse_prd_metadata(self) -> None:
        content = json.dumps(
            {
                "metadata": {
                    "generated": True,
                    "generator": "ralph-init",
                    "createdAt": "2026-03-01T12:30:00.250Z",
                    "title": "Shop",
                    "assumptions": ["DB up"],
                    "risks": [{"risk": "Outage", "likelihood": "H", "impact": "L"}],
                    "estimatedEffort": "1 week",
                    "totalTasks": 4,
                },
                "items": [],
            }
        )
        metadata = parse_prd_metadata(content)

        assert metadata is not None
        assert metadata.generator == "ralph-init"
        assert metadata.created_at == datetime(2026, 3, 1, 12, 30, 0, 250000, tzinfo=UTC)
        assert metadata.title == "Shop"
        assert metadata.assumptions == ["DB up"]
        assert metadata.risks == [Risk(risk="Outage", likelihood="H", impact="L")]
        assert metadata.estimated_effort == "1 week"
        assert metadata.total_tasks == 4

    def test_parse_prd_metadata_missing(self) -> None:
        assert parse_prd_metadata('{"items": []}') is None
        assert parse_prd_metadata("[]") is None

    def test_metadata_round_trip(self) -> None:
        """Metadata written by to_dict() reads back to the same values."""
        original = PlanMetadata(
            created_at=datetime(2026, 5, 4, 3, 2, 1, 123000, tzinfo=UTC),
            title="T",
            risks=[Risk(risk="R", likelihood="L", impact="H", mitigation="m")],
            total_tasks=2,
        )
        restored = parse_prd_metadata(json.dumps({"metadata": original.to_dict()}))
        assert restored == original


class TestNormalizePrdItems:
    """Tests for normalize_prd_items()."""

    def test_fills_passes_from_status(self) -> None:
        items = [
            {"description": "a", "status": "done"},
            {"description": "b", "status": "todo"},
            {"description": "c", "passes": True},
            {"description": "d"},
        ]
        normalized, changed = normalize_prd_items(items)

        assert [item["passes"] for item in normalized] == [True, False, True, False]
        assert changed == 3
        assert "passes" not in items[0]

    def test_non_dict_entries_pass_through(self) -> None:
        normalized, changed = normalize_prd_items(["x", 1])
        assert normalized == ["x", 1]
        assert changed == 0


class TestPlanTarget:
    """Tests for markdown path handling."""

    @pytest.mark.parametrize("name", ["plan.md", "PLAN.MD", "notes.markdown", "doc.mdx"])
    def test_markdown_paths(self, name: str) -> None:
        assert is_markdown_path(name)

    def test_non_markdown_paths(self) -> None:
        assert not is_markdown_path("prd.json")
        assert not is_markdown_path("plan")

    def test_markdown_target_redirects(self) -> None:
        target, warning = resolve_plan_target(Path("plans") / "plan.md")
        assert target == Path("plans") / "prd.json"
        assert warning is not None
        assert "plan.md" in warning

    def test_json_target_unchanged(self) -> None:
        assert resolve_plan_target("out/prd.json") == (Path("out/prd.json"), None)


class TestFormatTimestamp:
    """Tests for format_timestamp()."""

    def test_utc_milliseconds(self) -> None:
        value = datetime(2026, 1, 2, 3, 4, 5, 678901, tzinfo=UTC)
        assert format_timestamp(value) == "2026-01-02T03:04:05.678Z"

    def test_naive_is_treated_as_utc(self) -> None:
        assert format_timestamp(datetime(2026, 1, 1)) == "2026-01-01T00:00:00.000Z"
