from __future__ import annotations

"""Command line running median.

Plain mode reads one number per line and prints one median per line. With
``--column`` the input is read as CSV and a ``<column>_median`` column (and
``<column>_spike`` when a threshold is set) is appended to the table.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

import pandas as pd
from pydantic import ValidationError

from .config import CONFIG_PATH, FilterSettings, apply_env_overrides, load_settings, save_settings
from .env import load_env
from .filter import RunningMedianError
from .qc import spike_flags
from .series import medfilt_series, running_median
from .utils import safe_float, setup_logging


log = logging.getLogger(__name__)


def read_values(stream: TextIO) -> List[float]:
    values: list[float] = []
    for lineno, line in enumerate(stream, start=1):
        line = line.strip()
        if not line:
            continue
        v = safe_float(line)
        if v is None or v != v:
            log.warning("Skipping line %d: %r is not a number", lineno, line)
            continue
        values.append(v)
    return values


def run_plain(settings: FilterSettings, source: TextIO, sink: TextIO) -> int:
    values = read_values(source)
    medians = running_median(values, settings.window)
    if settings.threshold is None:
        for m in medians:
            sink.write(f"{m:g}\n")
    else:
        flags = spike_flags(values, settings.window, settings.threshold)
        for v, m, spike in zip(values, medians, flags):
            sink.write(f"{v:g}\t{m:g}\t{int(spike)}\n")
        log.info("%d of %d samples flagged as spikes", sum(flags), len(values))
    log.info("Filtered %d samples with window %d", len(values), settings.window)
    return len(values)


def run_table(settings: FilterSettings, source, sink) -> int:
    column = settings.column
    df = pd.read_csv(source)
    if column not in df.columns:
        raise KeyError(f"column {column!r} not found; available: {', '.join(map(str, df.columns))}")
    values = pd.to_numeric(df[column], errors="coerce")
    df[f"{column}_median"] = medfilt_series(values, settings.window)
    if settings.threshold is not None:
        df[f"{column}_spike"] = spike_flags(values.tolist(), settings.window, settings.threshold)
    df.to_csv(sink, index=False)
    log.info("Filtered column %s (%d rows) with window %d", column, len(df), settings.window)
    return len(df)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="running-median", description="Causal running median over a sliding window")
    ap.add_argument("--window", "-w", type=int, help="window size in samples")
    ap.add_argument("--threshold", "-t", type=float, help="flag samples this far from the running median")
    ap.add_argument("--column", "-c", help="CSV column to filter (enables CSV mode)")
    ap.add_argument("--input", "-i", type=Path, help="input file (default: stdin)")
    ap.add_argument("--output", "-o", type=Path, help="output file (default: stdout)")
    ap.add_argument("--config", type=Path, default=CONFIG_PATH)
    ap.add_argument("--save-config", action="store_true", help="persist the effective settings to --config")
    ap.add_argument("--verbose", "-v", action="store_true")
    args = ap.parse_args(argv)

    load_env()
    try:
        settings = apply_env_overrides(load_settings(args.config))
        settings = settings.merged(window=args.window, threshold=args.threshold, column=args.column)
    except ValidationError as e:
        ap.error(f"invalid settings: {e}")
    # data goes to stdout, diagnostics to stderr
    setup_logging(logging.DEBUG if args.verbose else settings.log_level, stream=sys.stderr)

    if args.save_config:
        save_settings(settings, args.config)
        log.info("Saved settings to %s", args.config)

    source = open(args.input, "r", encoding="utf-8") if args.input else sys.stdin
    sink = open(args.output, "w", encoding="utf-8", newline="") if args.output else sys.stdout
    try:
        if settings.column:
            run_table(settings, source, sink)
        else:
            run_plain(settings, source, sink)
    except (RunningMedianError, KeyError, ValueError) as e:
        ap.error(str(e))
    finally:
        if args.input:
            source.close()
        if args.output:
            sink.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
