from __future__ import annotations

"""CLI for drillstats: inspect, merge and reset per-drill statistics."""

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .. import __version__
from ..analytics.plots import plot_mistake_rates, plot_problem_scores
from ..analytics.report import areas_frame, cumulative_frame, export_csv, export_ndjson, export_parquet
from ..config.config import ConfigError, StatsConfig, load_config, validate_config
from ..stats.reset import clear_generic_history
from ..stats.schema import validate_session
from ..storage.records import append_history_entry
from ..storage.store import JsonFileStore
from .drill_registry import DrillStatsProfile, get_drill, list_drills, load_profile_stats, merge_session, rank_problem_areas
from .explain import enable as explain_enable, trace as xtrace


def terminal_confirm(message: str, *, input_fn: Optional[Callable[[str], str]] = None) -> bool:
    """Yes/no prompt on the terminal; anything but y/yes declines."""
    ask = input_fn or input
    try:
        answer = ask(f"{message} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def _format_area(area: Any) -> str:
    if hasattr(area, "problem_score"):
        return (
            f"{area.name}: score {area.problem_score:.1f} | first try {area.success_rate:.0f}% "
            f"| slow {area.slow_rate:.0f}% | avg {area.avg_time:.2f}s | n={area.attempts}"
        )
    line = f"{area.key}: mistakes {area.mistake_rate * 100:.0f}% | n={area.attempts}"
    if area.avg_time:
        line += f" | avg {area.avg_time:.2f}s"
    return line


def _cmd_list_drills(cfg: StatsConfig, args: argparse.Namespace) -> int:
    for p in list_drills(cfg):
        keys = p.history_key + (f", {p.cumulative_key}" if p.cumulative_key else "")
        print(f"{p.id}: {p.kind} | min attempts {p.min_attempts} | keys: {keys}")
    return 0


def _cmd_problems(cfg: StatsConfig, store: JsonFileStore, profile: DrillStatsProfile, args: argparse.Namespace) -> int:
    stats = load_profile_stats(profile, store)
    areas = rank_problem_areas(profile, stats)
    if args.limit is not None:
        areas = areas[: max(0, args.limit)]
    xtrace("problems_ranked", profile.cumulative_key, drill=profile.id, kind=profile.kind, count=len(areas))
    if args.json:
        print(json.dumps([a.to_dict() for a in areas], indent=2))
        return 0
    if not areas:
        print(f"No problem areas for '{profile.id}' yet.")
        return 0
    print(f"Problem areas for '{profile.id}' (worst first):")
    for a in areas:
        print(f"  {_format_area(a)}")
    return 0


def _cmd_merge(cfg: StatsConfig, store: JsonFileStore, profile: DrillStatsProfile, args: argparse.Namespace) -> int:
    with Path(args.session).open("r", encoding="utf-8") as f:
        raw = json.load(f)
    session = validate_session(profile.kind, raw)
    # the merge writes the whole mapping back, so nothing stored may be dropped
    cumulative = load_profile_stats(profile, store, strict=True)
    merge_session(profile, session, cumulative, store=store)
    entry: Dict[str, Any] = {
        "ts": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M"),
        "items": session,
    }
    append_history_entry(store, profile.history_key, entry, limit=cfg.storage.history_limit)
    print(f"Merged {len(session)} item(s) into '{profile.cumulative_key}'.")
    return 0


def _cmd_reset(cfg: StatsConfig, store: JsonFileStore, profile: DrillStatsProfile, args: argparse.Namespace) -> int:
    confirm = (lambda _msg: True) if args.yes else terminal_confirm
    cleared = clear_generic_history(
        profile.history_key,
        profile.cumulative_key,
        lambda: print(f"Cleared history for '{profile.id}'."),
        store=store,
        confirm=confirm,
    )
    if not cleared:
        print("Nothing cleared.")
        return 1
    return 0


def _cmd_report(cfg: StatsConfig, store: JsonFileStore, profile: DrillStatsProfile, args: argparse.Namespace) -> int:
    outdir = Path(args.out)
    outdir.mkdir(parents=True, exist_ok=True)
    stats = load_profile_stats(profile, store)
    areas = rank_problem_areas(profile, stats)
    areas_df = areas_frame(areas)
    export_csv(areas_df, outdir / f"{profile.id}_problem_areas.csv")
    cumulative_df = cumulative_frame(stats, profile.kind)
    export_ndjson(cumulative_df, outdir / f"{profile.id}_cumulative.ndjson")
    export_parquet(cumulative_df, outdir / f"{profile.id}_cumulative.parquet")
    if args.plot:
        plot = plot_problem_scores if profile.kind == "time" else plot_mistake_rates
        plot(areas_df, title=f"{profile.id}: problem areas", save_path=outdir / f"{profile.id}_problem_areas.png")
    print(f"Reports saved to: {outdir.resolve()}")
    return 0


_DRILL_COMMANDS = {
    "problems": _cmd_problems,
    "merge": _cmd_merge,
    "reset": _cmd_reset,
    "report": _cmd_report,
}


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="drillstats", description="Drill statistics: problem areas, merge, reset")
    p.add_argument("--config", default=None, help="Path to YAML config")
    p.add_argument("--store", default=None, help="Path to the JSON stats store (overrides config)")
    p.add_argument("--explain", action="store_true", help="Print trace lines")
    p.add_argument("--version", action="version", version=f"drillstats {__version__}")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list-drills")

    pp = sub.add_parser("problems", help="Show the items that need practice")
    pp.add_argument("--drill", required=True)
    pp.add_argument("--limit", type=int, default=None)
    pp.add_argument("--json", action="store_true")

    mp = sub.add_parser("merge", help="Merge a session JSON file into the cumulative stats")
    mp.add_argument("--drill", required=True)
    mp.add_argument("--session", required=True, help="JSON mapping of item -> session record")

    rp = sub.add_parser("reset", help="Clear history and cumulative stats of a drill")
    rp.add_argument("--drill", required=True)
    rp.add_argument("--yes", action="store_true", help="Do not ask for confirmation")

    ep = sub.add_parser("report", help="Write CSV/NDJSON/Parquet (and optionally PNG) reports")
    ep.add_argument("--drill", required=True)
    ep.add_argument("--out", default="reports")
    ep.add_argument("--plot", action="store_true")
    return p


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        cfg = validate_config(load_config(args.config))
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    if args.explain or cfg.explain:
        explain_enable(True)

    if args.cmd == "list-drills":
        return _cmd_list_drills(cfg, args)

    store = JsonFileStore(args.store or cfg.storage.path, indent=cfg.storage.indent)
    try:
        profile = get_drill(cfg, args.drill)
        if args.cmd != "reset" and not profile.has_cumulative:
            print(f"ERROR: Drill '{profile.id}' keeps no cumulative stats", file=sys.stderr)
            return 2
        return _DRILL_COMMANDS[args.cmd](cfg, store, profile, args)
    except KeyError as e:
        print(f"ERROR: {e.args[0] if e.args else e}", file=sys.stderr)
        return 2
    except (OSError, ValueError, TypeError) as e:
        # ValidationError and JSONDecodeError are ValueErrors
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
