"""ralph-plan - Convert markdown plans into PRD task lists for agent loops.

Parses checklists, frontmatter, metadata sections and inline tags from a
markdown plan and emits the PRD JSON file an agent loop works through.
"""

__version__ = "0.1.0"
