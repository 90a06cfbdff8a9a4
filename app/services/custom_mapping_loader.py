"""
Custom Mapping Loader

Loads a visualization-type complexity mapping from a CSV export of the feature
list (Feature Area, Feature, Complexity, Feasibility columns) to override the
built-in lookup table.
"""
import csv
import os
from typing import Dict, List, Optional
from pathlib import Path
import logging

from app.services.complexity import (
    VISUALIZATION_MAPPING,
    VisualizationClassifier,
    VisualizationMetadata,
    parse_level,
)

logger = logging.getLogger(__name__)

VISUALIZATION_FEATURE_AREA = "visualization"


class CustomMappingLoader:
    """Load a visualization mapping from CSV, falling back to the built-in table."""

    def __init__(self, mapping_file_path: Optional[str] = None):
        """
        Initialize the mapping loader.

        Args:
            mapping_file_path: Path to CSV mapping file. If None, looks for default file.
        """
        self.mapping_file_path = mapping_file_path
        self.mappings: Dict[str, VisualizationMetadata] = {}
        self._load_mappings()

    def _get_default_mapping_path(self) -> Optional[str]:
        """Get default mapping file path."""
        project_root = Path(__file__).parent.parent.parent
        default_paths = [
            project_root / "visualization_mapping.csv",
            project_root / "mappings" / "visualization_mapping.csv",
        ]

        for path in default_paths:
            if path.exists():
                return str(path)

        return None

    def _load_mappings(self) -> None:
        """Load visualization rows from the CSV file, keyed by lowercased feature."""
        file_path = self.mapping_file_path or self._get_default_mapping_path()

        if not file_path or not os.path.exists(file_path):
            logger.warning(f"Mapping file not found: {file_path}")
            return

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                reader = csv.DictReader(f)

                for row in reader:
                    feature_area = (row.get('Feature Area') or '').strip()
                    feature = (row.get('Feature') or '').strip()
                    complexity = (row.get('Complexity') or '').strip()
                    feasibility = (row.get('Feasibility') or '').strip()

                    if not feature or feature_area.lower() != VISUALIZATION_FEATURE_AREA:
                        continue

                    level = parse_level(complexity)
                    if level is None:
                        logger.warning(f"Skipping '{feature}': unknown complexity '{complexity}'")
                        continue

                    self.mappings[feature.lower()] = VisualizationMetadata(
                        complexity=level.label,
                        feasibility=feasibility or "Unknown",
                    )

            logger.info(f"Loaded {len(self.mappings)} visualization mappings from {file_path}")

        except (OSError, csv.Error, UnicodeDecodeError) as e:
            self.mappings.clear()
            logger.error(f"Error loading mapping file {file_path}: {e}", exc_info=True)

    @property
    def loaded(self) -> bool:
        return bool(self.mappings)

    def get_visualization_mapping(self) -> Dict[str, VisualizationMetadata]:
        """Loaded mapping, or a copy of the built-in table when nothing was loaded."""
        if self.mappings:
            return dict(self.mappings)
        return dict(VISUALIZATION_MAPPING)

    def build_classifier(self) -> VisualizationClassifier:
        return VisualizationClassifier(self.get_visualization_mapping())

    def get_all_mappings(self) -> List[Dict[str, str]]:
        """Get all loaded mappings."""
        return [
            {"feature": key, "complexity": meta.complexity, "feasibility": meta.feasibility}
            for key, meta in self.mappings.items()
        ]

    def reload_mappings(self, file_path: Optional[str] = None) -> None:
        """
        Reload mappings from file.

        Args:
            file_path: Optional path to mapping file. If None, uses current path.
        """
        if file_path:
            self.mapping_file_path = file_path
        self.mappings.clear()
        self._load_mappings()
