#!/usr/bin/env python3
"""
gpxstats-analyze: summary statistics for GPX tracks and routes.

Each file is ingested with the configured granularity (consecutive fixes
closer than that many metres are merged) and summarized on stdout.
Files that cannot be read or are structurally invalid are reported and
skipped; the exit status is 1 if any file failed, and 2 when the configuration is
invalid or fzf is needed but missing.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from gpxstats.analyze.route import Route, summarize_route
from gpxstats.analyze.track import Track, summarize_track
from gpxstats.config import as_granularity, load_config
from gpxstats.errors import ConfigError, DocumentError, FzfNotFoundError, SourceError
from gpxstats.util.fzf import fzf_select_paths
from gpxstats.util.logging import log, utc_now_iso

TSV_COLUMNS = (
    "points", "discarded", "distance_m", "net_distance_m", "height_gain_m",
    "duration_s", "resting_s", "avg_speed_mps", "max_speed_mps",
)


def print_report(path: Path, stats: dict, *, tsv: bool) -> None:
    if tsv:
        print(f"{path}\t" + "\t".join(
            _fmt(stats.get(col, 0)) for col in TSV_COLUMNS
        ))
        return

    print(f"\n{path}  ({stats.get('name', '')})")
    print(f"  points        : {stats.get('points', 0)} ({stats.get('discarded', 0)} merged)")
    print(f"  distance (m)  : {stats.get('distance_m', 0.0):.2f}")
    print(f"  net dist (m)  : {stats.get('net_distance_m', 0.0):.2f}")
    print(f"  climb (m)     : {stats.get('height_gain_m', 0.0):.1f}")
    print(f"  steepest (deg): {stats.get('steepest_gradient_deg', 0.0):.1f}")
    if "duration_s" in stats:
        print(f"  duration (s)  : {stats['duration_s']}")
        print(f"  resting (s)   : {stats['resting_s']}")
        print(f"  travelling (s): {stats['travelling_s']}")
        print(f"  avg speed m/s : {stats['avg_speed_mps']:.3f}")
        print(f"  max speed m/s : {stats['max_speed_mps']:.3f}")


def _fmt(v) -> str:
    return f"{v:.3f}" if isinstance(v, float) else str(v)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="gpxstats: Analyze GPX file(s).")
    ap.add_argument("gpx", nargs="*",
                    help="One or more GPX files. If omitted, use fzf selection under the work root.")
    ap.add_argument("--work-root", default=None,
                    help="Working root (default: from gpxstats config or ~/GPS/_work)")
    ap.add_argument("--granularity", default=None,
                    help="Merge distance in metres (default: from config, 5.0)")
    ap.add_argument("--route", action="store_true",
                    help="Analyze the <rte> element instead of <trk>.")
    ap.add_argument("--exclude-rests", action="store_true",
                    help="Average speed over travelling time only.")
    ap.add_argument("--tsv", action="store_true",
                    help="Print tab-separated output (good for piping).")
    ap.add_argument("--report", action="store_true",
                    help="Print the per-point processing report.")
    ap.add_argument("--plot", action="store_true",
                    help="Show a plot of each analyzed file.")
    return ap


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        cfg = load_config()
        granularity = (
            as_granularity(args.granularity, "--granularity")
            if args.granularity is not None
            else cfg.analyze.granularity
        )
    except ConfigError as e:
        log(f"Configuration error: {e}")
        return 2

    use_route = args.route or cfg.analyze.kind == "route"
    include_rests = cfg.analyze.include_rests and not args.exclude_rests
    model = Route if use_route else Track

    if args.gpx:
        selected = [Path(p).expanduser() for p in args.gpx]
    else:
        work_root = Path(args.work_root).expanduser() if args.work_root else cfg.paths.work_root
        gpx_files = sorted(work_root.rglob("*.gpx"))
        if not gpx_files:
            raise SystemExit(f"No GPX files found under {work_root}")

        try:
            selected = fzf_select_paths(
                gpx_files,
                header="Select GPX file(s) to analyze:",
                multi=True,
                root=work_root,
            )
        except FzfNotFoundError as e:
            log(str(e))
            return 2

    if args.tsv:
        print("file\t" + "\t".join(TSV_COLUMNS))

    failed = 0
    for path in selected:
        if not path.is_file():
            log(f"Skipping (not a file): {path}")
            failed += 1
            continue
        try:
            obj = model.from_file(path, granularity)
        except (SourceError, DocumentError) as e:
            log(f"Skipping {path}: {e}")
            failed += 1
            continue

        if use_route:
            stats = summarize_route(obj)
        else:
            stats = summarize_track(obj, include_rests=include_rests)
        print_report(path, stats, tsv=args.tsv)

        if args.report:
            print(f"# report generated {utc_now_iso()}")
            print(obj.build_report(), end="")

        if args.plot:
            from gpxstats.visualize.plot import plot_track
            plot_track(obj)

    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
