#!/usr/bin/env python3
"""
CMXCTL CLI
----------
Routes `cluster create` and `init-kots-app` to the request builder and the
app scaffolder, rendering results with rich. Every CmxError raised below
this layer is reported once here and turned into exit status 1.
"""

import sys
import logging
import argparse
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.markup import escape

from cmxctl.core import defaults
from cmxctl.core.cluster import ClusterRequestBuilder
from cmxctl.core.errors import CmxError
from cmxctl.parsing.nodegroups import parse_int
from cmxctl.scaffold.engine import AppScaffolder
from cmxctl.cli.formatter import CmxFormatter

# Global console for consistent styling across the application
console = Console()

logger = logging.getLogger("cmxctl.cli")


def _int_flag(value: str) -> int:
    """argparse type for count/size flags; same integer rule as node-group descriptors."""
    parsed = parse_int(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}")
    return parsed


class CmxCLI:
    """
    CLI wrapper that translates user commands into builder/scaffolder calls.
    """

    def __init__(self, out: Optional[Console] = None):
        self.console = out or console
        self.formatter = CmxFormatter(self.console)
        self.parser = argparse.ArgumentParser(
            prog="cmxctl",
            description="cmxctl - test cluster and KOTS app tooling",
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        self._setup_args()

    def _setup_args(self):
        """Configures the command-line flags and subcommands."""
        self.parser.add_argument("-v", "--version", action="version", version=f"cmxctl v{defaults.VERSION}")
        self.parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
        subparsers = self.parser.add_subparsers(dest="command", metavar="Command")

        # 'cluster create'
        cluster_parser = subparsers.add_parser("cluster", help="Manage test clusters")
        cluster_sub = cluster_parser.add_subparsers(dest="cluster_command", metavar="Command")
        create = cluster_sub.add_parser("create", help="Create test clusters")
        create.add_argument("--name", default="", help="Cluster name (defaults to random name)")
        create.add_argument("--distribution", required=True,
                            help="Kubernetes distribution of the cluster to provision")
        create.add_argument("--version", dest="k8s_version", default="",
                            help="Kubernetes version to provision (format is distribution dependent)")
        create.add_argument("--license-id", default="",
                            help="License ID to use for the installation (required for Embedded Cluster distribution)")
        create.add_argument("--ttl", default="", help="Cluster TTL (duration, max 48h)")
        create.add_argument("--tag", dest="tags", action="append", default=[],
                            help="Tag to apply to the cluster (key=value format, can be specified multiple times)")
        create.add_argument("--nodes", type=_int_flag, default=defaults.DEFAULT_NODE_COUNT, help="Node count")
        create.add_argument("--min-nodes", type=_int_flag, default=0,
                            help="Minimum Node count (non-negative number) (only for EKS, AKS and GKE clusters).")
        create.add_argument("--max-nodes", type=_int_flag, default=0,
                            help="Maximum Node count (non-negative number) (only for EKS, AKS and GKE clusters).")
        create.add_argument("--disk", type=_int_flag, default=defaults.DEFAULT_DISK_GIB,
                            help="Disk Size (GiB) to request per node")
        create.add_argument("--instance-type", default="", help="The type of instance to use (e.g. m6i.large)")
        create.add_argument("--default-nodegroup", default="",
                            help="Node group to create (name=?,instance-type=?,nodes=?,min-nodes=?,max-nodes=?,disk=? format)")
        create.add_argument("--additional-nodegroup", dest="additional_nodegroups", action="append", default=[],
                            help="Node group to create (name=?,instance-type=?,nodes=?,min-nodes=?,max-nodes=?,disk=? "
                                 "format, can be specified multiple times)")
        create.add_argument("--dry-run", action="store_true", help="Dry run")
        create.add_argument("--output", choices=defaults.OUTPUT_FORMATS, default=defaults.default_output_format(),
                            help="The output format to use. One of: json|table|wide (default: table)")

        # 'init-kots-app'
        init_parser = subparsers.add_parser("init-kots-app", help="Scaffold KOTS manifests for a Helm chart")
        init_parser.add_argument("directory", help="Path to the Helm chart directory")
        init_parser.add_argument("--app-name", default=None, help="Application name (defaults to the chart name)")
        init_parser.add_argument("--force", "-f", action="store_true", help="Overwrite an existing kots/ directory")

    def _cluster_create(self, args: argparse.Namespace) -> int:
        request = ClusterRequestBuilder().build(
            distribution=args.distribution,
            name=args.name,
            version=args.k8s_version,
            license_id=args.license_id,
            ttl=args.ttl,
            instance_type=args.instance_type,
            nodes=args.nodes,
            min_nodes=args.min_nodes,
            max_nodes=args.max_nodes,
            disk=args.disk,
            default_node_group=args.default_nodegroup,
            additional_node_groups=args.additional_nodegroups,
            tags=args.tags,
            dry_run=args.dry_run,
        )

        if request.dry_run:
            if args.output == "json":
                self.formatter.print_cluster_request(request, "json")
                return 0
            self.formatter.print_payload(request)
            self.console.print("Dry run succeeded.")
            return 0

        self.formatter.print_cluster_request(request, args.output)
        return 0

    def _init_kots_app(self, args: argparse.Namespace) -> int:
        reports = AppScaffolder(args.directory, app_name=args.app_name).run(force=args.force)
        self.formatter.print_scaffold_report(reports)
        self.console.print(Panel.fit(
            "[bold green]KOTS app initialized.[/bold green] Edit kots/manifests/ and run "
            "[bold white]make release[/bold white] from the kots/ directory.",
            border_style="green"
        ))
        return 0

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Primary routing entry point. Returns the process exit status."""
        argv = sys.argv[1:] if argv is None else argv
        if not argv:
            self.parser.print_help()
            return 0

        args = self.parser.parse_args(argv)
        logging.basicConfig(level=defaults.log_level(args.verbose))

        try:
            if args.command == "cluster" and args.cluster_command == "create":
                return self._cluster_create(args)
            if args.command == "init-kots-app":
                return self._init_kots_app(args)
        except CmxError as e:
            logger.debug("Command failed", exc_info=True)
            self.console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            return 1

        self.parser.print_help()
        return 0


def main():
    """Application entry point with interrupt handling."""
    try:
        sys.exit(CmxCLI().run())
    except KeyboardInterrupt:
        console.print("\n[bold red]Terminated by user.[/bold red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
