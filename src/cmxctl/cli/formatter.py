# src/cmxctl/cli/formatter.py
import json
from typing import Dict, Any, List

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich.markup import escape

from cmxctl.core.models import ClusterRequest

# Initialize the Rich console for high-quality terminal output
console = Console()


class CmxFormatter:
    """
    Renders cluster requests and scaffolding reports for the terminal.
    """

    def __init__(self, out: Console = None):
        self.console = out or console

    def print_cluster_request(self, request: ClusterRequest, output: str = "table"):
        if output == "json":
            self.console.print_json(json.dumps(request.to_payload()))
            return

        summary = Table(title=f"Cluster: {escape(request.name)}", show_header=True, header_style="bold magenta")
        summary.add_column("Distribution")
        summary.add_column("Version")
        summary.add_column("TTL")
        if output == "wide":
            summary.add_column("License ID")
            summary.add_column("Tags")
        # User-supplied values render as plain text, never as markup
        row = [Text(request.distribution), Text(request.version or "-"), Text(request.ttl or "-")]
        if output == "wide":
            row.append(Text(request.license_id or "-"))
            row.append(Text(", ".join(f"{t.key}={t.value}" for t in request.tags) or "-"))
        summary.add_row(*row)
        self.console.print(summary)

        self.print_node_groups(request)

    def print_node_groups(self, request: ClusterRequest):
        table = Table(title="Node Groups", show_header=True, header_style="bold magenta")
        table.add_column("Name", style="cyan")
        table.add_column("Instance Type")
        table.add_column("Nodes", justify="right")
        table.add_column("Min / Max", justify="right")
        table.add_column("Disk (GiB)", justify="right")

        for ng in request.node_groups:
            if ng.min_nodes is None and ng.max_nodes is None:
                bounds = "-"
            else:
                bounds = f"{ng.min_nodes or 0} / {ng.max_nodes or 0}"
            table.add_row(
                Text(ng.name) if ng.name else "[dim]<default>[/dim]",
                Text(ng.instance_type) if ng.instance_type else "[dim]<default>[/dim]",
                str(ng.nodes),
                bounds,
                str(ng.disk),
            )

        self.console.print(table)

    def print_payload(self, request: ClusterRequest):
        """Shows the request body that would be sent to the API."""
        body = json.dumps(request.to_payload(), indent=2)
        self.console.print(Panel(
            Syntax(body, "json", theme="monokai"),
            title="Request Payload",
            border_style="dim"
        ))

    def print_scaffold_report(self, reports: List[Dict[str, Any]]):
        table = Table(title="init-kots-app Report", show_header=True, header_style="bold magenta")
        table.add_column("File", style="dim")
        table.add_column("Status")

        for r in reports:
            status = r.get("status", "")
            color = "green" if status == "CREATED" else "yellow" if status == "UPDATED" else "dim"
            table.add_row(Text(r.get("path", "")), f"[{color}]{status}[/{color}]")

        self.console.print(table)
