"""
Diagnostics report for image cube reconstruction.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional


class ReconstructionReport:
    """Collect statistics and warnings of one reconstruction run."""

    def __init__(self, config: Dict[str, Any]):
        """
        Initialize the report.

        Args:
            config: Reconstruction configuration summary
        """
        self.config = config
        self.stats: Dict[str, Any] = {}
        self.warnings: List[str] = []

    def add_stats(self, stats: Dict[str, Any]):
        """Add reconstruction statistics."""
        self.stats.update(stats)

    def add_warning(self, warning: str):
        """Add a diagnostic warning."""
        self.warnings.append(warning)

    def generate_report(self, output_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Generate the report.

        Args:
            output_path: Optional path to save report as JSON

        Returns:
            Dictionary containing the complete report
        """
        report = {
            "metadata": {
                "generation_time": datetime.now().isoformat(),
                "config": self.config,
                "centroided": self.stats.get("centroided"),
                "from_cache": self.stats.get("from_cache", False),
            },
            "scans": self._generate_scan_section(),
            "lines": self._generate_line_section(),
            "image": self._generate_image_section(),
            "warnings": self.warnings,
            "summary": self._generate_summary(),
        }

        if output_path:
            with open(output_path, "w") as f:
                json.dump(report, f, indent=2, default=str)
            logging.info(f"Reconstruction report saved to: {output_path}")

        return report

    def _generate_scan_section(self) -> Dict[str, Any]:
        n_scans = self.stats.get("n_scans", 0)
        n_selected = self.stats.get("n_selected", 0)
        return {
            "total": n_scans,
            "positioned": self.stats.get("n_positioned", 0),
            "out_of_range": self.stats.get("n_out_of_range", 0),
            "left_to_right": self.stats.get("n_left_to_right", 0),
            "right_to_left": self.stats.get("n_right_to_left", 0),
            "selected": n_selected,
            "selected_fraction": n_selected / n_scans if n_scans else 0.0,
        }

    def _generate_line_section(self) -> Dict[str, Any]:
        return {
            "path_lines": self.stats.get("n_path_lines", 0),
            "imaged_lines": self.stats.get("n_lines", 0),
            "dropped_lines": self.stats.get("n_path_lines", 0) - self.stats.get("n_lines", 0),
            "degenerate_lines": self.stats.get("degenerate_lines", []),
            "first_pass_direction": self.stats.get("first_pass_direction"),
        }

    def _generate_image_section(self) -> Dict[str, Any]:
        return {
            "shape": self.stats.get("shape"),
            "pixel_pitch_um": self.stats.get("pixel_pitch_um"),
            "pitch_source": "manual" if self.config.get("pixel_pitch_um") else "scans_per_line",
            "mass_channels": self.stats.get("n_channels"),
        }

    def _generate_summary(self) -> Dict[str, Any]:
        degenerate = self.stats.get("degenerate_lines", [])
        return {
            "complete": not degenerate and self.stats.get("n_out_of_range", 0) == 0,
            "n_warnings": len(self.warnings),
            "recommendations": self._generate_recommendations(),
        }

    def _generate_recommendations(self) -> List[str]:
        recommendations = []

        n_out_of_range = self.stats.get("n_out_of_range", 0)
        n_scans = self.stats.get("n_scans", 0)
        if n_scans and n_out_of_range > 0.5 * n_scans:
            recommendations.append(
                "Most scans fall outside the stage path; check the clock offset"
            )

        if self.stats.get("degenerate_lines"):
            recommendations.append(
                "Some lines had too few scans; consider a larger pixel pitch or a slower stage"
            )

        if self.stats.get("direction_disagreement"):
            recommendations.append(
                "Acquisition did not start on a sweep; verify the first line of the image"
            )

        return recommendations
