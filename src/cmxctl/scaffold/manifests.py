#!/usr/bin/env python3
"""
CMXCTL KOTS MANIFEST WRITER
---------------------------
Generates the starter KOTS manifests for a Helm chart: HelmChart, Preflight,
Config, support-bundle Collector and Application.

Output uses ruamel.yaml in round-trip mode so key order is kept exactly as
built: kind, apiVersion, metadata, spec.
"""

import io
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from cmxctl.core import defaults
from cmxctl.core.models import ChartYaml
from cmxctl.core.errors import ScaffoldError

logger = logging.getLogger("cmxctl.scaffold")


def _to_commented(data: Any) -> Any:
    """Recursively converts dicts and lists into ruamel's ordered containers."""
    if isinstance(data, dict):
        cmap = CommentedMap()
        for key, value in data.items():
            cmap[key] = _to_commented(value)
        return cmap
    if isinstance(data, list):
        return CommentedSeq([_to_commented(item) for item in data])
    return data


def _resource(kind: str, api_version: str, name: str, spec: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "kind": kind,
        "apiVersion": api_version,
        "metadata": {"name": name},
        "spec": spec,
    }


def read_chart_yaml(chart_dir: Union[str, Path]) -> ChartYaml:
    """Loads name, version and icon from <chart_dir>/Chart.yaml."""
    path = Path(chart_dir) / defaults.CHART_FILE_NAME
    try:
        data = YAML(typ="safe").load(path.read_text(encoding="utf-8-sig"))
    except FileNotFoundError:
        raise ScaffoldError(f"Chart.yaml not found in {chart_dir}")
    except (OSError, UnicodeDecodeError, YAMLError) as e:
        raise ScaffoldError(f"Unable to read {path}: {e}") from e

    if not isinstance(data, dict) or not data.get("name"):
        raise ScaffoldError(f"{path} does not define a chart name")

    # The chart name becomes a file name under kots/manifests/
    name = str(data["name"])
    if "/" in name or "\\" in name or ".." in name or name == ".":
        raise ScaffoldError(f"{path} has an invalid chart name: {name!r}")

    return ChartYaml(
        name=name,
        version=str(data.get("version") or ""),
        icon=str(data.get("icon") or ""),
    )


class KotsManifestWriter:
    """
    Writes KOTS custom resources into a manifests directory.
    Each writer method returns the path of the file it produced.
    """

    def __init__(self, manifests_dir: Union[str, Path]):
        self.manifests_dir = Path(manifests_dir)
        self.yaml = YAML(typ="rt")
        self.yaml.indent(mapping=4, sequence=4, offset=2)
        self.yaml.width = 4096

    def dump(self, resource: Dict[str, Any]) -> str:
        stream = io.StringIO()
        self.yaml.dump(_to_commented(resource), stream)
        return stream.getvalue()

    def write(self, resource: Dict[str, Any], file_name: str) -> Path:
        path = self.manifests_dir / file_name
        if path.resolve().parent != self.manifests_dir.resolve():
            raise ScaffoldError(f"Refusing to write {file_name} outside {self.manifests_dir}")
        path.write_text(self.dump(resource), encoding="utf-8")
        logger.debug(f"Wrote {resource['kind']} manifest to {path}")
        return path

    def helm_chart(self, chart: ChartYaml) -> Path:
        resource = _resource("HelmChart", "kots.io/v1beta1", chart.name, {
            "chart": {
                "name": chart.name,
                "chartVersion": chart.version,
            },
            "values": {"foo": {}, "bar": {}, "baz": {}},
        })
        return self.write(resource, f"{chart.name}.yaml")

    def preflight(self, chart: ChartYaml) -> Path:
        resource = _resource("Preflight", "troubleshoot.replicated.com/v1beta1", chart.name, {
            "analyzers": [
                {
                    "clusterVersion": {
                        "checkName": "Kubernetes Version",
                        "outcomes": [
                            {"fail": {
                                "when": "< 1.15.0",
                                "message": "This app requires at least Kubernetes 1.15.0",
                                "uri": "https://www.kubernetes.io",
                            }},
                            {"pass": {
                                "when": ">= 1.15.0",
                                "message": "This app has at least Kubernetes 1.15.0",
                                "uri": "https://www.kubernetes.io",
                            }},
                        ],
                    },
                },
                {
                    "nodeResources": {
                        "checkName": "Total CPU Capacity",
                        "outcomes": [
                            {"fail": {
                                "when": "sum(cpuCapacity) < 4",
                                "message": "This app requires a cluster with at least 4 cores.",
                                "uri": "https://kurl.sh/docs/install-with-kurl/system-requirements",
                            }},
                            {"pass": {
                                "message": "This cluster has at least 4 cores.",
                            }},
                        ],
                    },
                },
            ],
        })
        return self.write(resource, "preflight.yaml")

    def config(self, chart: ChartYaml) -> Path:
        resource = _resource("Config", "kots.io/v1beta1", chart.name, {
            "groups": [
                {
                    "name": "Config",
                    "title": "Config Options",
                    "description": "A default example of how to collect configuration "
                                   "from an end user. This can be mapped to helm values",
                    "items": [
                        {
                            "name": "username",
                            "title": "Username",
                            "type": "text",
                            "help_text": "Enter the default admin username",
                        },
                    ],
                },
            ],
        })
        return self.write(resource, "config.yaml")

    def support_bundle(self) -> Path:
        resource = _resource("Collector", "troubleshoot.replicated.com/v1beta1", "collector", {
            "collectors": [
                {"clusterInfo": {}},
                {"clusterResources": {}},
            ],
        })
        return self.write(resource, "support-bundle.yaml")

    def application(self, chart: ChartYaml, app_name: str) -> Path:
        spec: Dict[str, Any] = {"title": app_name}
        if chart.icon:
            spec["icon"] = chart.icon
        resource = _resource("Application", "kots.io/v1beta1", app_name, spec)
        return self.write(resource, "replicated-app.yaml")
