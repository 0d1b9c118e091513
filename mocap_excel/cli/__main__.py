from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from mocap_excel.config.loader import ConfigError, catalog_from_env, load_catalog
from mocap_excel.excel.normalize import DEFAULT_FPS
from mocap_excel.excel.reader import WorkbookDecodeError
from mocap_excel.logging.init import log_summary, set_debug, setup_logging
from mocap_excel.models.series import Row, RowsBySheet
from mocap_excel.services.acquire import AcquisitionError, fetch_url_bytes, is_url, read_file_bytes
from mocap_excel.services.needed_metrics import (
    parse_excel_to_needed_metrics,
    parse_excel_url_to_needed_metrics,
)
from mocap_excel.services.summary import (
    render_data_sets_summary,
    render_needed_summary,
    render_rows_summary,
)
from mocap_excel.services.workbook import parse_workbook_bytes, select_primary_sheet

"""CLI entrypoint: inspect a motion-capture workbook from a path or URL.

Modes:
- default: list every usable sheet with its row count and columns
- --rows: legacy single-sheet pick
- --needed: per-role needed-metrics extraction with warnings

Settings precedence: command-line flags, then environment (.env is loaded
first, without overriding variables already set), then built-in defaults.
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_EXTRACTION_FAILED = 2

FPS_ENV_VAR = "MOCAP_EXCEL_FPS_GUESS"


def _load_env_file(path: Path) -> None:
    """Load .env into the process environment; existing variables win."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="mocap-excel", description="Motion-capture workbook inspector")
    p.add_argument("source", help="Workbook path or http(s) URL")
    p.add_argument("--fps", type=float, default=None, help=f"Frames per second for frame-indexed sheets (default {DEFAULT_FPS:g})")
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--needed", action="store_true", help="Extract per-role needed metrics")
    mode.add_argument("--rows", action="store_true", help="Print rows of the primary sheet only")
    p.add_argument("--catalog", default=None, help="Metric catalog YAML (needed mode)")
    p.add_argument("--json", action="store_true", help="Print the extracted payload as JSON")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_fps(cli_value: float | None) -> float:
    if cli_value is not None:
        return cli_value
    raw = os.getenv(FPS_ENV_VAR)
    if raw:
        return float(raw)
    return DEFAULT_FPS


def _jsonable_rows(rows: list[Row]) -> list[dict[str, float | None]]:
    # NaN は JSON 非対応なので null に置換
    return [{k: (None if v != v else v) for k, v in r.items()} for r in rows]


def _print_json(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False))


def _run_needed(args: argparse.Namespace, logger: logging.Logger) -> int:
    try:
        catalog = load_catalog(Path(args.catalog)) if args.catalog else catalog_from_env()
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if is_url(args.source):
        result = parse_excel_url_to_needed_metrics(args.source, catalog)
    else:
        result = parse_excel_to_needed_metrics(args.source, catalog)

    if args.json:
        _print_json(result.to_dict())
    if not result.ok:
        logger.error(f"extraction failed: {result.why}")
    log_summary(render_needed_summary(result))
    return EXIT_SUCCESS if result.ok else EXIT_EXTRACTION_FAILED


def _load_data_sets(source: str, fps: float) -> RowsBySheet:
    buf = fetch_url_bytes(source) if is_url(source) else read_file_bytes(source)
    return parse_workbook_bytes(buf, fps)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # [] を渡されたときに sys.argv が混入しないよう None のときだけ読む
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    if args.needed:
        return _run_needed(args, logger)

    try:
        fps = _resolve_fps(args.fps)
    except ValueError:
        logger.error(f"config: {FPS_ENV_VAR} is not a number: {os.getenv(FPS_ENV_VAR)!r}")
        return EXIT_FATAL

    try:
        sets = _load_data_sets(args.source, fps)
    except AcquisitionError as e:
        logger.error(f"acquire: {e}")
        return EXIT_FATAL
    except WorkbookDecodeError as e:
        logger.error(f"decode: {e}")
        return EXIT_FATAL

    if args.rows:
        name = select_primary_sheet(sets)
        rows = sets[name] if name is not None else []
        if args.json:
            _print_json(_jsonable_rows(rows))
        log_summary(render_rows_summary(name, rows))
        return EXIT_SUCCESS

    if args.json:
        _print_json({name: _jsonable_rows(rows) for name, rows in sets.items()})
    else:
        for name, rows in sets.items():
            columns = sorted({k for r in rows for k in r} - {"t"})
            logger.info(f"sheet={name} rows={len(rows)} columns={columns}")
    log_summary(render_data_sets_summary(sets))
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
