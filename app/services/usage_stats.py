"""
Usage Stats Sections

Flattens the nested `usage_stats` payload (usage, content creation, user,
performance, quick-win and pilot tables) into titled tabular sections.
Row keys may be snake_case, UPPER_SNAKE_CASE or camelCase.
"""
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from app.schemas.report import UsageTableHeader, UsageTableSection

MISSING = "—"

Cell = Union[str, int, float]


def _to_upper_snake(key: str) -> str:
    """camelCase / snake_case -> UPPER_SNAKE_CASE."""
    return re.sub(r"([A-Z])", r"_\1", key).lstrip("_").upper()


def us_val(row: Dict[str, Any], *keys: str) -> Optional[Cell]:
    """
    First non-null value among keys; each key is tried as given and then in
    UPPER_SNAKE form.
    """
    for key in keys:
        value = row.get(key)
        if value is not None:
            return value
        value = row.get(_to_upper_snake(key))
        if value is not None:
            return value
    return None


@dataclass(frozen=True)
class Column:
    label: str
    key: str
    flex: float = 1.0
    # Truncated columns render missing values as "" instead of MISSING
    truncate: Optional[int] = None

    def cell(self, row: Dict[str, Any]) -> Cell:
        value = us_val(row, self.key)
        if self.truncate is not None:
            return str(value if value is not None else "")[: self.truncate]
        if value is None:
            return MISSING
        if isinstance(value, bool) or not isinstance(value, (str, int, float)):
            return str(value)
        return value


@dataclass(frozen=True)
class TableLayout:
    title: str
    # (group key, table key) inside the usage_stats payload
    source: Tuple[str, str]
    columns: Sequence[Column]


USAGE_SECTIONS: Sequence[TableLayout] = (
    TableLayout(
        "Most Used Content (Last 60 Days)",
        ("usage_stats", "most_used_content_last_60_days"),
        (
            Column("RANK", "rank", 0.4),
            Column("TARGET NAME", "target_name", 1.2),
            Column("PATH", "cogipf_target_path", 1, truncate=40),
            Column("CONTENT TYPE", "content_type", 0.6),
            Column("VIEWS (60D)", "views_last_60_days", 0.5),
            Column("PRIMARY USER", "primary_user", 0.8),
        ),
    ),
    TableLayout(
        "Inactive Content (Last 60 Days)",
        ("usage_stats", "inactive_content_last_60_days"),
        (
            Column("RANK", "rank", 0.4),
            Column("TARGET NAME", "target_name", 1.2),
            Column("CONTENT TYPE", "content_type", 0.6),
            Column("DAYS SINCE LAST EXEC", "days_since_last_execution", 0.6),
            Column("LAST USER", "last_executing_user", 0.6),
            Column("REPORT PATH", "report_path", 1, truncate=40),
        ),
    ),
    TableLayout(
        "Content Creation Rate",
        ("content_creation", "content_creation_rate"),
        (
            Column("MONTH", "month_label", 0.6),
            Column("CONTENT TYPE", "content_type", 0.6),
            Column("NEW", "new_artifacts_created", 0.4),
            Column("MODIFIED", "artifacts_modified", 0.5),
            Column("EXAMPLE", "example_of_new_content", 1.5, truncate=50),
        ),
    ),
    TableLayout(
        "Top Active Users",
        ("user_stats", "top_active_users"),
        (
            Column("RANK", "rank", 0.4),
            Column("USER NAME", "user_name", 1.2),
            Column("EXECUTIONS (60D)", "executions_last_60_days", 0.6),
            Column("PRIMARY FOCUS", "primary_focus_most_viewed", 1),
        ),
    ),
    TableLayout(
        "Developer Activity",
        ("user_stats", "developer_activity"),
        (
            Column("USERNAME", "username", 1),
            Column("REPORTS CREATED", "reports_created", 0.6),
            Column("DASHBOARDS CREATED", "dashboards_created", 0.6),
            Column("EXAMPLE WORKBOOKS", "example_workbooks_published", 1.2, truncate=40),
        ),
    ),
    TableLayout(
        "Frequently Used Slow Reports",
        ("performance", "frequently_used_slow_reports"),
        (
            Column("RANK", "rank", 0.4),
            Column("WORKBOOK NAME", "workbook_name", 1),
            Column("AVG LOAD (SEC)", "avg_load_time_seconds", 0.5),
            Column("VIEWS (60D)", "views_last_60_days", 0.5),
            Column("REPORT PATH", "report_path", 1, truncate=40),
        ),
    ),
    TableLayout(
        "Quick Wins",
        ("quick_wins", "quick_wins_scatter"),
        (
            Column("TARGET NAME", "target_name", 1.2),
            Column("CONTENT TYPE", "content_type", 0.6),
            Column("VIEWS (60D)", "views_last_60_days", 0.5),
            Column("MIGRATION CATEGORY", "migration_category", 0.8),
            Column("PATH", "cogipf_target_path", 1, truncate=40),
        ),
    ),
    TableLayout(
        "Recommended Pilot Reports",
        ("pilot_recommendations", "recommended_pilot_reports"),
        (
            Column("TARGET NAME", "target_name", 1.2),
            Column("CONTENT TYPE", "content_type", 0.6),
            Column("MIGRATION CATEGORY", "migration_category", 0.8),
            Column("AVG VIEWS", "avg_views", 0.5),
        ),
    ),
)


def _table_rows(usage_stats: Dict[str, Any], group: str, table: str) -> List[Dict[str, Any]]:
    container = usage_stats.get(group)
    if not isinstance(container, dict):
        return []
    rows = container.get(table)
    if not isinstance(rows, list):
        return []
    return [r for r in rows if isinstance(r, dict)]


def build_usage_stats_sections(usage_stats: Optional[Dict[str, Any]]) -> List[UsageTableSection]:
    """Sections in fixed order; tables that are absent or empty are omitted."""
    if not usage_stats:
        return []
    sections: List[UsageTableSection] = []
    for layout in USAGE_SECTIONS:
        rows = _table_rows(usage_stats, *layout.source)
        if not rows:
            continue
        sections.append(UsageTableSection(
            title=layout.title,
            headers=[UsageTableHeader(label=c.label, flex=c.flex) for c in layout.columns],
            rows=[[c.cell(r) for c in layout.columns] for r in rows],
        ))
    return sections
