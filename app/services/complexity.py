"""
Complexity Classifier

Deterministic complexity policies used by the assessment report:
  - structural: (tab/page count, visualization count) -> level
  - visualization type: static lookup with first-substring-match fallback
  - calculated field / filter / prompt type mappings
  - overall assessment level from per-dashboard levels
"""
import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence

UNKNOWN = "Unknown"


class ComplexityLevel(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def label(self) -> str:
        """Display form: Low, Medium, High, Critical."""
        return self.value.capitalize()

    def escalate(self) -> "ComplexityLevel":
        """Next level up; critical stays critical."""
        idx = LEVEL_ORDER.index(self)
        return LEVEL_ORDER[min(idx + 1, len(LEVEL_ORDER) - 1)]


LEVEL_ORDER: Sequence[ComplexityLevel] = (
    ComplexityLevel.LOW,
    ComplexityLevel.MEDIUM,
    ComplexityLevel.HIGH,
    ComplexityLevel.CRITICAL,
)


def classify(group_count: int, visualization_count: int) -> ComplexityLevel:
    """
    Structural complexity of a dashboard (tabs) or report (pages).
    Checked from critical downward; either dimension alone can raise the level:
      - critical: >= 10
      - high: 5..9
      - medium: 2..4
      - low otherwise
    """
    if group_count >= 10 or visualization_count >= 10:
        return ComplexityLevel.CRITICAL
    if 5 <= group_count <= 9 or 5 <= visualization_count <= 9:
        return ComplexityLevel.HIGH
    if 2 <= group_count <= 4 or 2 <= visualization_count <= 4:
        return ComplexityLevel.MEDIUM
    return ComplexityLevel.LOW


@dataclass(frozen=True)
class VisualizationMetadata:
    complexity: str
    feasibility: str


# Product-defined visualization feature list (Looker perspective). Order matters
# for the substring fallback: the first matching entry wins.
VISUALIZATION_MAPPING: Mapping[str, VisualizationMetadata] = MappingProxyType({
    "area": VisualizationMetadata("Low", "Yes"),
    "bar": VisualizationMetadata("Low", "Yes"),
    "box plot": VisualizationMetadata("High", "Yes"),
    "bubble": VisualizationMetadata("High", "Partial"),
    "bullet": VisualizationMetadata("Critical", "No"),
    "conditional formatting column": VisualizationMetadata("Critical", "No"),
    "crosstab": VisualizationMetadata("High", "Partial"),
    "data player": VisualizationMetadata("Critical", "No"),
    "decision tree": VisualizationMetadata("Critical", "No"),
    "driver analysis": VisualizationMetadata("Critical", "No"),
    "drop-down list": VisualizationMetadata("Critical", "No"),
    "heatmap": VisualizationMetadata("Critical", "No"),
    "hierarchy bubble": VisualizationMetadata("Critical", "No"),
    "kpi": VisualizationMetadata("Low", "Partial"),
    "legacy map": VisualizationMetadata("Critical", "No"),
    "line": VisualizationMetadata("Low", "Yes"),
    "line and column": VisualizationMetadata("Low", "Yes"),
    "list": VisualizationMetadata("Low", "No"),
    "map": VisualizationMetadata("High", "Yes"),
    "marimekko": VisualizationMetadata("Critical", "No"),
    "network": VisualizationMetadata("Critical", "No"),
    "packed bubble": VisualizationMetadata("Critical", "No"),
    "pie": VisualizationMetadata("Low", "Yes"),
    "point": VisualizationMetadata("High", "Partial"),
    "radar": VisualizationMetadata("Critical", "No"),
    "radial": VisualizationMetadata("Critical", "No"),
    "scatter": VisualizationMetadata("Low", "Yes"),
    "spiral": VisualizationMetadata("Critical", "No"),
    "stacked bar": VisualizationMetadata("Low", "Yes"),
    "stacked column": VisualizationMetadata("Low", "Yes"),
    "summary": VisualizationMetadata("Medium", "Partial"),
    "sunburst": VisualizationMetadata("Critical", "No"),
    "table": VisualizationMetadata("Low", "Yes"),
    "tornado": VisualizationMetadata("High", "Partial"),
    "treemap": VisualizationMetadata("Critical", "No"),
    "waterfall": VisualizationMetadata("Medium", "Yes"),
    "word cloud": VisualizationMetadata("Medium", "Yes"),
    "custom viz": VisualizationMetadata("High", "Yes"),
    "stepped area": VisualizationMetadata("High", "Yes"),
    "stepped line": VisualizationMetadata("High", "Yes"),
    "stacked combination": VisualizationMetadata("Medium", "Yes"),
    "smooth line": VisualizationMetadata("Medium", "Yes"),
    "smooth area": VisualizationMetadata("Medium", "Yes"),
    "gantt": VisualizationMetadata("Critical", "No"),
    "floating bar": VisualizationMetadata("Critical", "No"),
    "floating column": VisualizationMetadata("Critical", "No"),
    "donut": VisualizationMetadata("Medium", "Yes"),
    "clustered column": VisualizationMetadata("Low", "Yes"),
    "clustered combination": VisualizationMetadata("Low", "Yes"),
    "clustered bar": VisualizationMetadata("Low", "Yes"),
    "list, crosstab": VisualizationMetadata("Low", "Yes"),
    "repeater table": VisualizationMetadata("Critical", "No"),
    "data table": VisualizationMetadata("Critical", "No"),
    "repeater": VisualizationMetadata("Critical", "No"),
    "singleton": VisualizationMetadata("Medium", "Yes"),
})

UNKNOWN_VISUALIZATION = VisualizationMetadata(UNKNOWN, UNKNOWN)


class VisualizationClassifier:
    """Visualization-type lookup over an injected, read-only mapping."""

    def __init__(self, mapping: Optional[Mapping[str, VisualizationMetadata]] = None):
        self.mapping: Mapping[str, VisualizationMetadata] = MappingProxyType(
            dict(mapping if mapping is not None else VISUALIZATION_MAPPING)
        )

    def classify(self, raw_type: Optional[str]) -> VisualizationMetadata:
        """
        Exact match on the lowercased, trimmed type; otherwise the first entry
        (in mapping order) where either string contains the other. No ranking.
        A blank or missing type is Unknown; it does not match the first entry
        as an empty substring would.
        """
        normalized = (raw_type or "").strip().lower()
        if not normalized:
            return UNKNOWN_VISUALIZATION
        exact = self.mapping.get(normalized)
        if exact is not None:
            return exact
        for key, value in self.mapping.items():
            if key in normalized or normalized in key:
                return value
        return UNKNOWN_VISUALIZATION

    def level(self, raw_type: Optional[str]) -> Optional[ComplexityLevel]:
        """Lookup complexity as a level, None when unknown."""
        return parse_level(self.classify(raw_type).complexity)


_default_viz_classifier = VisualizationClassifier()


def classify_viz_type(raw_type: Optional[str]) -> VisualizationMetadata:
    """Classify against the built-in mapping."""
    return _default_viz_classifier.classify(raw_type)


def parse_level(value: Optional[str]) -> Optional[ComplexityLevel]:
    """'High' / 'high' / ' HIGH ' -> ComplexityLevel.HIGH; anything else -> None."""
    try:
        return ComplexityLevel((value or "").strip().lower())
    except ValueError:
        return None


CALCULATION_TYPE_LEVELS: Mapping[str, ComplexityLevel] = MappingProxyType({
    "expression": ComplexityLevel.LOW,
    "case_expression": ComplexityLevel.MEDIUM,
    "if_expression": ComplexityLevel.MEDIUM,
    "aggregate_function": ComplexityLevel.HIGH,
    "function": ComplexityLevel.HIGH,
})


def classify_calculated_field(
    calculation_type: Optional[str],
    unknown_level: ComplexityLevel = ComplexityLevel.LOW,
) -> ComplexityLevel:
    """Calculated field complexity by calculation type; unlisted types get unknown_level."""
    return CALCULATION_TYPE_LEVELS.get(calculation_type or "", unknown_level)


FILTER_TYPE_LEVELS: Mapping[str, ComplexityLevel] = MappingProxyType({
    "detail": ComplexityLevel.LOW,
    "summary": ComplexityLevel.MEDIUM,
})


def classify_filter(
    filter_type: Optional[str],
    parameter_references: Sequence[str] = (),
    referenced_columns: Sequence[str] = (),
) -> ComplexityLevel:
    """
    Filter complexity: detail -> low, summary -> medium, other -> high.
    One level up when parameters are referenced, one more when more than
    three columns are referenced, never past critical.
    """
    level = FILTER_TYPE_LEVELS.get(filter_type or "", ComplexityLevel.HIGH)
    if len(parameter_references) > 0:
        level = level.escalate()
    if len(referenced_columns) > 3:
        level = level.escalate()
    return level


PROMPT_TYPE_LEVELS: Mapping[str, ComplexityLevel] = MappingProxyType({
    "text": ComplexityLevel.LOW,
    "value": ComplexityLevel.LOW,
    "page": ComplexityLevel.MEDIUM,
})


def classify_prompt(prompt_type: Optional[str]) -> ComplexityLevel:
    return PROMPT_TYPE_LEVELS.get(prompt_type or "", ComplexityLevel.HIGH)


def overall_complexity(
    dashboard_levels: Sequence[ComplexityLevel],
    high_share_threshold: float = 0.3,
) -> str:
    """
    Assessment-wide level from per-dashboard structural levels:
    Critical if any dashboard is critical, High if high dashboards exceed the
    threshold share, Medium if any is high, else Low.
    """
    critical = sum(1 for lvl in dashboard_levels if lvl == ComplexityLevel.CRITICAL)
    high = sum(1 for lvl in dashboard_levels if lvl == ComplexityLevel.HIGH)
    if critical > 0:
        return ComplexityLevel.CRITICAL.label
    if high > len(dashboard_levels) * high_share_threshold:
        return ComplexityLevel.HIGH.label
    if high > 0:
        return ComplexityLevel.MEDIUM.label
    return ComplexityLevel.LOW.label


def complexity_stats(levels: Iterable[Optional[ComplexityLevel]]) -> dict[str, int]:
    """Counts per level; None (unknown) is skipped."""
    stats = {lvl.value: 0 for lvl in LEVEL_ORDER}
    for lvl in levels:
        if lvl is not None:
            stats[lvl.value] += 1
    return stats
