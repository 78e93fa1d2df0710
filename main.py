from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any

from cyclechart import (
    ChartConfig,
    ChartTuning,
    fill_date_range,
    layout_chart,
    load_tuning,
    normalize_records,
    rasterize_chart,
    save_png,
)
from cyclechart.adapters.normalize import parse_date
from cyclechart.config import DEFAULT_TUNING, VARIANTS, VIEW_MODES
from cyclechart.records import DailyRecord


LOGGER = logging.getLogger("cyclechart.cli")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="cyclechart")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a JSON record file to a PNG chart.")
    _add_chart_arguments(render)
    render.add_argument("--out", type=Path, required=True)
    render.add_argument("--pixel-ratio", type=float, default=None)

    layout = sub.add_parser("layout", help="Print the computed chart layout as JSON.")
    _add_chart_arguments(layout)
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    tuning = load_tuning(args.tuning) if args.tuning is not None else DEFAULT_TUNING
    records = _load_records(args.records, start=args.start, end=args.end)
    config = ChartConfig(
        view_mode=args.view_mode,
        width=args.width,
        height=args.height,
        is_enlarged=args.enlarged,
        variant=args.variant,
        show_value_labels=not args.no_value_labels,
    )

    if args.command == "render":
        frame = rasterize_chart(records, config, args.pixel_ratio, tuning=tuning)
        out = save_png(frame, args.out)
        print(f"wrote {out} ({frame.shape[1]}x{frame.shape[0]}, records={len(records)})")
        return

    if args.command == "layout":
        print(json.dumps(_layout_summary(records, config, tuning), indent=2, sort_keys=True))
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _add_chart_arguments(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("records", type=Path)
    cmd.add_argument("--width", type=float, default=350.0)
    cmd.add_argument("--height", type=float, default=200.0)
    cmd.add_argument("--view-mode", choices=list(VIEW_MODES), default="all")
    cmd.add_argument("--variant", choices=list(VARIANTS), default="smooth")
    cmd.add_argument("--enlarged", action="store_true")
    cmd.add_argument("--no-value-labels", action="store_true")
    cmd.add_argument("--tuning", type=Path, default=None, help="TOML file with a [tuning] table.")
    cmd.add_argument("--start", default=None, help="Fill one record per day from this date (YYYY-MM-DD).")
    cmd.add_argument("--end", default=None, help="Fill one record per day up to this date (YYYY-MM-DD).")


def _load_records(path: Path, *, start: str | None, end: str | None) -> list[DailyRecord]:
    with path.open("r", encoding="utf-8") as f:
        raw: Any = json.load(f)
    if isinstance(raw, dict):
        raw = raw.get("records", [])
    records = normalize_records(raw)
    if start is None and end is None:
        return records
    first = parse_date(start) if start is not None else (records[0].date if records else None)
    last = parse_date(end) if end is not None else (records[-1].date if records else None)
    if first is None or last is None:
        return records
    LOGGER.info("filling date range %s..%s", first, last)
    return fill_date_range(records, first, last)


def _layout_summary(records: list[DailyRecord], config: ChartConfig, tuning: ChartTuning) -> dict[str, Any]:
    layout = layout_chart(records, config, tuning=tuning)
    return {
        "range": [round(layout.temperature_range.min, 4), round(layout.temperature_range.max, 4)],
        "plot_rect": [layout.rect.left, layout.rect.top, layout.rect.width, layout.rect.height],
        "gridline_indices": list(layout.grid.vertical_indices),
        "label_indices": list(layout.label_indices),
        "labels": [label.text for label in layout.labels],
        "bands": [{"index": b.index, "alpha": round(b.alpha, 4)} for b in layout.bands],
        "glyphs": [
            {
                "index": g.index,
                "ring": g.has_ring,
                "kinds": [i.kind for i in g.indicators],
            }
            for g in layout.glyphs
        ],
    }


if __name__ == "__main__":
    main()
