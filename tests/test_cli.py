import io
import json

import pytest
from rich.console import Console

from cmxctl.cli.main import CmxCLI


def _cli():
    buf = io.StringIO()
    return CmxCLI(out=Console(file=buf, width=200, force_terminal=False)), buf


def test_cluster_create_json_output():
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "eks", "--name", "c1",
        "--additional-nodegroup", "name=ng1,instance-type=t2.medium,nodes=3,disk=20",
        "--tag", "env=ci", "--output", "json",
    ])
    assert code == 0
    payload = json.loads(buf.getvalue())
    assert payload["name"] == "c1"
    assert payload["node_groups"][1] == {
        "name": "ng1",
        "instance_type": "t2.medium",
        "node_count": 3,
        "min_node_count": None,
        "max_node_count": None,
        "disk_gib": 20,
    }


def test_cluster_create_table_output():
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "kind", "--name", "c1",
        "--default-nodegroup", "name=main,nodes=2,disk=40",
    ])
    assert code == 0
    out = buf.getvalue()
    assert "main" in out
    assert "Node Groups" in out


def test_cluster_create_dry_run():
    cli, buf = _cli()
    code = cli.run(["cluster", "create", "--distribution", "kind", "--name", "c1", "--dry-run"])
    assert code == 0
    assert "Dry run succeeded." in buf.getvalue()


@pytest.mark.parametrize("descriptor", [
    "name=ng1,instance-type=t2.medium,nodes=3,disk=20,invalid=invalid",
    "name=ng1,instance-type=t2.medium,nodes=invalid,disk=20",
    "invalid",
])
def test_cluster_create_bad_descriptor_exits_nonzero(descriptor):
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "eks",
        "--additional-nodegroup", descriptor,
    ])
    assert code == 1
    out = buf.getvalue()
    assert "Error:" in out
    assert "parse node groups" in out


def test_cluster_create_requires_distribution():
    cli, _ = _cli()
    with pytest.raises(SystemExit) as exc_info:
        cli.run(["cluster", "create"])
    assert exc_info.value.code == 2


def test_init_kots_app(tmp_path):
    (tmp_path / "Chart.yaml").write_text("name: mychart\nversion: 0.0.1\n")
    cli, buf = _cli()
    assert cli.run(["init-kots-app", str(tmp_path)]) == 0
    assert (tmp_path / "kots" / "manifests" / "mychart.yaml").is_file()
    assert "KOTS app initialized." in buf.getvalue()


def test_init_kots_app_missing_chart(tmp_path):
    cli, buf = _cli()
    assert cli.run(["init-kots-app", str(tmp_path)]) == 1
    assert "Chart.yaml not found" in buf.getvalue()


def test_no_arguments_prints_help(capsys):
    cli, _ = _cli()
    assert cli.run([]) == 0
    assert "usage: cmxctl" in capsys.readouterr().out


@pytest.mark.parametrize("descriptor,literal", [
    ("name=[/x],nodes=1,disk=20", "[/x]"),
    ("name=[red]gpu,instance-type=[bold]big,nodes=1", "[red]gpu"),
])
def test_bracketed_values_render_literally(descriptor, literal):
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "kind", "--name", "c1",
        "--default-nodegroup", descriptor,
    ])
    assert code == 0
    assert literal in buf.getvalue()


def test_bracketed_tag_and_name_in_wide_output():
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "[/d]", "--name", "[/c]",
        "--tag", "team=[/ops]", "--output", "wide",
    ])
    assert code == 0
    out = buf.getvalue()
    assert "team=[/ops]" in out
    assert "[/d]" in out
    assert "[/c]" in out


def test_dry_run_json_is_machine_readable():
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "kind", "--name", "c1",
        "--dry-run", "--output", "json",
    ])
    assert code == 0
    payload = json.loads(buf.getvalue())
    assert payload["name"] == "c1"
    assert payload["node_groups"][0]["name"] == "default"


@pytest.mark.parametrize("flag", ["--nodes", "--min-nodes", "--max-nodes", "--disk"])
@pytest.mark.parametrize("value", [" 3", "1_000", "3.5", "many"])
def test_integer_flags_use_descriptor_rule(flag, value):
    cli, _ = _cli()
    with pytest.raises(SystemExit) as exc_info:
        cli.run(["cluster", "create", "--distribution", "eks", f"{flag}={value}"])
    assert exc_info.value.code == 2


def test_integer_flags_accept_plain_values():
    cli, buf = _cli()
    code = cli.run([
        "cluster", "create", "--distribution", "eks", "--name", "c1",
        "--nodes=+2", "--disk=80", "--output", "json",
    ])
    assert code == 0
    ng = json.loads(buf.getvalue())["node_groups"][0]
    assert (ng["node_count"], ng["disk_gib"]) == (2, 80)


def test_init_kots_app_undecodable_helmignore(tmp_path):
    (tmp_path / "Chart.yaml").write_text("name: mychart\n")
    (tmp_path / ".helmignore").write_bytes(b"\xff\xfe bad")
    cli, buf = _cli()
    assert cli.run(["init-kots-app", str(tmp_path)]) == 1
    assert "Error:" in buf.getvalue()
