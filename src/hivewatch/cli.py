"""CLI entrypoint for hivewatch."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from hivewatch.config.loader import load_config
from hivewatch.config.schema import HivewatchConfig
from hivewatch.discovery.reconciler import discover_sessions
from hivewatch.discovery.sources import TmuxSource
from hivewatch.discovery.types import DiscoveredSession
from hivewatch.errors import ConfigurationError
from hivewatch.hierarchy.types import AgentNode, HierarchySnapshot
from hivewatch.logger import setup_logging
from hivewatch.metrics.types import MetricsSnapshot
from hivewatch.monitor import SessionMonitor

logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="YAML config file",
)
@click.option("--debug", "debug_flag", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, debug_flag: bool) -> None:
    """Observe running Claude/Codex sessions."""
    try:
        cfg = load_config(config_path)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc
    setup_logging(debug=debug_flag or cfg.logging.debug, json_output=cfg.logging.json)
    ctx.obj = cfg


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


def _sessions_table(sessions: list[DiscoveredSession], title: str = "Sessions") -> Table:
    table = Table(title=title)
    table.add_column("tmux session")
    table.add_column("command")
    table.add_column("pid", justify="right")
    table.add_column("cwd")
    for s in sessions:
        table.add_row(s.group, s.command, str(s.pid) if s.pid is not None else "-", s.cwd)
    return table


def _metrics_table(metrics: dict[str, MetricsSnapshot]) -> Table:
    table = Table(title="Metrics")
    table.add_column("session")
    table.add_column("tokens in/out", justify="right")
    table.add_column("cost $", justify="right")
    table.add_column("avg ms", justify="right")
    table.add_column("p95 ms", justify="right")
    table.add_column("p99 ms", justify="right")
    table.add_column("errors %", justify="right")
    table.add_column("tools")
    for sid, m in metrics.items():
        top = sorted(m.tool_counts.items(), key=lambda kv: (-kv[1], kv[0]))[:3]
        table.add_row(
            sid,
            f"{m.tokens.input}/{m.tokens.output}",
            f"{m.tokens.cost:.4f}",
            f"{m.latency.avg:.0f}",
            f"{m.latency.p95:.0f}",
            f"{m.latency.p99:.0f}",
            f"{m.error_rate:.1f}",
            ", ".join(f"{name}={count}" for name, count in top),
        )
    return table


def _node_label(node: AgentNode) -> Text:
    label = Text(node.session_id, style="bold")
    if node.subagent_type:
        label.append(f" [{node.subagent_type}]", style="cyan")
    if node.description:
        label.append(f" {node.description}", style="dim")
    label.append(" done" if node.is_completed else " running", style="green" if node.is_completed else "yellow")
    return label


def _hierarchy_tree(snapshot: HierarchySnapshot) -> Tree:
    children: dict[str, list[str]] = {}
    for sid, node in snapshot.nodes.items():
        if node.parent_id is not None:
            children.setdefault(node.parent_id, []).append(sid)

    tree = Tree("Hierarchy")
    stack: list[tuple[Tree, str]] = [(tree, root) for root in reversed(snapshot.roots)]
    seen: set[str] = set()
    while stack:
        branch, sid = stack.pop()
        if sid in seen:
            continue
        seen.add(sid)
        sub = branch.add(_node_label(snapshot.nodes[sid]))
        for child in reversed(children.get(sid, [])):
            stack.append((sub, child))
    return tree


@main.command("discover")
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table")
@click.pass_obj
def discover_command(cfg: HivewatchConfig, as_json: bool) -> None:
    """Run one discovery pass and list agent sessions."""
    source = TmuxSource(binary=cfg.discovery.tmux_binary, timeout=cfg.discovery.timeout_seconds)
    sessions = discover_sessions(source)
    if as_json:
        click.echo(json.dumps([s.to_dict() for s in sessions], indent=2))
        return
    if not sessions:
        click.echo("No agent sessions found")
        return
    _console().print(_sessions_table(sessions))


@main.command("replay")
@click.argument("events_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables")
@click.pass_obj
def replay_command(cfg: HivewatchConfig, events_path: Path, as_json: bool) -> None:
    """Fold a JSONL file of hook events and print metrics and hierarchy."""
    monitor = SessionMonitor.from_config(cfg)
    accepted = dropped = 0
    for lineno, line in enumerate(events_path.read_text(encoding="utf-8", errors="replace").splitlines(), 1):
        if not line.strip():
            continue
        try:
            item: Any = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("Skipping invalid JSON on line %d", lineno)
            dropped += 1
            continue
        if monitor.ingest(item):
            accepted += 1
        else:
            dropped += 1

    metrics = monitor.all_metrics()
    hierarchy = monitor.hierarchy()
    if as_json:
        payload = {
            "metrics": {sid: m.to_dict() for sid, m in metrics.items()},
            "hierarchy": hierarchy.to_dict(),
            "events": {"accepted": accepted, "dropped": dropped},
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console = _console()
    console.print(f"{accepted} event(s) ingested, {dropped} dropped")
    console.print(_metrics_table(metrics))
    console.print(_hierarchy_tree(hierarchy))


@main.command("watch")
@click.option("--iterations", default=0, type=int, help="Stop after N polls (0 = run until interrupted)")
@click.option("--interval", default=None, type=float, help="Override discovery.poll_interval_seconds")
@click.pass_obj
def watch_command(cfg: HivewatchConfig, iterations: int, interval: float | None) -> None:
    """Poll for sessions and report the ones that appear or vanish."""
    monitor = SessionMonitor.from_config(cfg)
    delay = interval if interval is not None else cfg.discovery.poll_interval_seconds
    console = _console()

    count = 0
    try:
        while True:
            result = monitor.poll()
            for s in result.new:
                console.print(f"[green]+[/green] {s.group} ({s.command}, pid {s.pid}) {s.cwd}")
            for s in result.gone:
                console.print(f"[red]-[/red] {s.group} ({s.command})")
            count += 1
            if iterations and count >= iterations:
                break
            time.sleep(delay)
    except KeyboardInterrupt:
        pass
    console.print(_sessions_table(monitor.known_sessions(), title="Active sessions"))


if __name__ == "__main__":
    main()
