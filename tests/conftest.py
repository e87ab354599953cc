"""Pytest configuration and shared fixtures for ralph-plan tests."""

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def structured_plan() -> str:
    """A structured plan with frontmatter, sections, tags and criteria."""
    return """---
title: Feature Implementation
summary: Implement user authentication feature
estimatedEffort: 3-5 days
---

# Authentication Feature

## Assumptions

- Database is available
- Using JWT for tokens

## Tasks

- [ ] **Configure JWT** - Set up JWT library [effort: XS] [risk: L]
  - Install dependencies
  - Add environment variables
- [ ] **Create endpoints** - Build login/logout API [effort: M] [risk: M]
  - POST /login endpoint
  - POST /logout endpoint
- [x] **Setup complete** - Project initialized [effort: XS] [risk: L]
"""


@pytest.fixture
def simple_plan() -> str:
    """A plain checklist with no metadata."""
    return "- [ ] First task\n- [x] Second task completed\n- [ ] Third task\n"
