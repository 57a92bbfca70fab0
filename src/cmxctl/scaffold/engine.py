#!/usr/bin/env python3
"""
CMXCTL APP SCAFFOLDER
---------------------
Drives `init-kots-app`: validates the chart directory, lays out
kots/manifests/ next to the chart and runs every boilerplate writer.

Resulting layout:

    <chart>/
        .helmignore          (kots/ entry ensured)
        Chart.yaml
        kots/
            .gitignore
            Makefile
            manifests/
                <chart>.yaml
                preflight.yaml
                config.yaml
                support-bundle.yaml
                replicated-app.yaml
"""

import shutil
import logging
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

from cmxctl.core import defaults
from cmxctl.core.errors import ScaffoldError
from cmxctl.scaffold.ignore_files import read_helmignore, write_helmignore, write_gitignore, write_makefile
from cmxctl.scaffold.manifests import KotsManifestWriter, read_chart_yaml

logger = logging.getLogger("cmxctl.scaffold")


class AppScaffolder:
    """
    Generates KOTS packaging boilerplate for a Helm chart directory.
    """

    def __init__(self, chart_dir: Union[str, Path], app_name: Optional[str] = None):
        self.chart_dir = Path(chart_dir).resolve()
        self.app_name = app_name
        self.kots_dir = self.chart_dir / defaults.KOTS_DIR_NAME
        self.manifests_dir = self.kots_dir / defaults.MANIFESTS_DIR_NAME

    def _check_inputs(self, force: bool):
        if not self.chart_dir.is_dir():
            raise ScaffoldError(f"Chart directory not found: {self.chart_dir}")
        if not (self.chart_dir / defaults.CHART_FILE_NAME).is_file():
            raise ScaffoldError(f"{defaults.CHART_FILE_NAME} not found in {self.chart_dir}")
        if self.kots_dir.exists() and not force:
            raise ScaffoldError(
                f"'{self.kots_dir}' already exists. Use --force to overwrite."
            )

    def run(self, force: bool = False) -> List[Dict[str, Any]]:
        """
        Writes every boilerplate file and returns one report per file.

        Raises:
            ScaffoldError: the chart is missing or unreadable, or kots/
                already exists and force is not set.
        """
        self._check_inputs(force)
        chart = read_chart_yaml(self.chart_dir)
        app_name = self.app_name or chart.name

        # Read every input before kots/ is touched so a bad file leaves the tree intact
        helmignore_path = self.chart_dir / ".helmignore"
        helmignore_before = read_helmignore(self.chart_dir)

        if self.kots_dir.exists():
            logger.info(f"Removing existing {self.kots_dir}")
            shutil.rmtree(self.kots_dir)
        self.manifests_dir.mkdir(parents=True, exist_ok=True)

        writer = KotsManifestWriter(self.manifests_dir)
        reports = []
        try:
            write_helmignore(self.chart_dir)
            reports.append(self._report(helmignore_path,
                                        self._helmignore_status(helmignore_path, helmignore_before)))
            reports.append(self._report(write_gitignore(self.kots_dir), "CREATED"))
            reports.append(self._report(write_makefile(self.kots_dir), "CREATED"))
            reports.append(self._report(writer.helm_chart(chart), "CREATED"))
            reports.append(self._report(writer.preflight(chart), "CREATED"))
            reports.append(self._report(writer.config(chart), "CREATED"))
            reports.append(self._report(writer.support_bundle(), "CREATED"))
            reports.append(self._report(writer.application(chart, app_name), "CREATED"))
        except OSError as e:
            logger.error(f"Scaffolding failed in {self.chart_dir}: {e}")
            raise ScaffoldError(f"Failed to write boilerplate: {e}") from e

        logger.info(f"Scaffolded {len(reports)} files for chart '{chart.name}'")
        return reports

    def _helmignore_status(self, path: Path, before: Optional[str]) -> str:
        if before is None:
            return "CREATED"
        after = path.read_text(encoding="utf-8")
        return "UNCHANGED" if after == before else "UPDATED"

    def _report(self, path: Path, status: str) -> Dict[str, Any]:
        return {
            "path": str(path.relative_to(self.chart_dir)),
            "status": status,
        }
