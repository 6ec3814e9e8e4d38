"""pgen CLI entrypoint.

Subcommands: list, show, add, delete, export, info.

Every subcommand goes through the same command surface a UI shell would use and
prints its JSON payload on stdout. Failures are reported on stderr with exit
status 1.

Usage:
  pgen list
  pgen add draft.json            # number/id/created_at filled in when absent
  pgen export <id> [--content FILE]
  pgen --data-dir /tmp/pg --set log_level=DEBUG info
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from portfolio_generator.adapters.clock import SystemClock
from portfolio_generator.adapters.telemetry.jsonl import JsonlTelemetry
from portfolio_generator.config.config_loader import ConfigLoader
from portfolio_generator.config.configs import APP_VERSION, AppConfig
from portfolio_generator.core.commands import CommandDispatcher, CommandResult
from portfolio_generator.core.drafts import new_portfolio_from
from portfolio_generator.core.repository import build_repository
from portfolio_generator.errors.errors import PortfolioStoreError
from portfolio_generator.ports.telemetry import Telemetry
from portfolio_generator.render.markdown import render_markdown
from portfolio_generator.types.types import Portfolio, PortfolioData

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class CliError(Exception):
    """Raised for user-facing CLI failures (bad input files, unknown ids)."""


def build_parser() -> argparse.ArgumentParser:
    """
    Return the top-level CLI argument parser.
    """
    p = argparse.ArgumentParser(prog="pgen", description="Manage locally stored portfolios")
    p.add_argument("--config", type=Path, help="Path to a TOML config file")
    p.add_argument(
        "--set",
        dest="config_overrides",
        action="append",  # builds a list containing each key=value
        default=[],
        metavar="KEY=VALUE",
        help="Override a config entry (may be repeated)",
    )
    p.add_argument("--data-dir", type=Path, help="Directory holding portfolios.json")
    p.add_argument("--downloads-dir", type=Path, help="Target directory for exports")
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    sub = p.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="Print the whole store")

    show = sub.add_parser("show", help="Print one portfolio")
    show.add_argument("id")

    add = sub.add_parser("add", help="Upsert a portfolio from a JSON file")
    add.add_argument("file", type=Path, help="JSON object with portfolio fields")

    delete = sub.add_parser("delete", help="Delete a portfolio by id")
    delete.add_argument("id")

    export = sub.add_parser("export", help="Export a portfolio as Markdown to the downloads dir")
    export.add_argument("id")
    export.add_argument("--content", type=Path, help="Pre-rendered Markdown; rendered if omitted")

    sub.add_parser("info", help="Print application info")
    return p


def _parse_cli_overrides(args: argparse.Namespace) -> Mapping[str, Any]:
    overrides: dict[str, Any] = {}

    for item in args.config_overrides:
        key, sep, value = item.partition("=")
        if sep == "":
            raise CliError(f"--set requires KEY=VALUE format (got {item!r})")
        key = key.strip()
        if not key:
            raise CliError(f"--set requires a non-empty KEY (got {item!r})")
        overrides[key] = value

    for key in ("data_dir", "downloads_dir", "log_level"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    return overrides


def load_app_config(args: argparse.Namespace) -> AppConfig:
    loader = ConfigLoader()
    file_cfg = loader.load_file(args.config) if args.config else None
    return loader.resolve(file_cfg=file_cfg, cli_overrides=_parse_cli_overrides(args))


def _build_telemetry(cfg: AppConfig) -> Optional[Telemetry]:
    if cfg.telemetry_path is None:
        return None
    return JsonlTelemetry(
        session_id=str(uuid.uuid4()),
        app_version=APP_VERSION,
        sink_path=cfg.telemetry_path,
    )


# --- subcommands ---------------------------------------------


def _emit(payload: Any) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _unwrap(result: CommandResult) -> Any:
    if not result.ok:
        raise CliError(result.error or "unknown error")
    return result.data


def _find(dispatcher: CommandDispatcher, portfolio_id: str) -> Portfolio:
    data = PortfolioData.model_validate(_unwrap(dispatcher.invoke("get_portfolios")))
    portfolio = data.find(portfolio_id)
    if portfolio is None:
        raise CliError(f"Portfolio not found: {portfolio_id}")
    return portfolio


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CliError(f"Failed to read {path}: {exc}") from exc


def cmd_list(dispatcher: CommandDispatcher, args: argparse.Namespace) -> int:
    _emit(_unwrap(dispatcher.invoke("get_portfolios")))
    return 0


def cmd_show(dispatcher: CommandDispatcher, args: argparse.Namespace) -> int:
    _emit(_find(dispatcher, args.id).model_dump(mode="json"))
    return 0


def cmd_add(dispatcher: CommandDispatcher, args: argparse.Namespace) -> int:
    try:
        fields = json.loads(_read_text(args.file))
    except json.JSONDecodeError as exc:
        raise CliError(f"Invalid JSON in {args.file}: {exc}") from exc
    if not isinstance(fields, dict):
        raise CliError(f"{args.file} must contain a JSON object")

    data = PortfolioData.model_validate(_unwrap(dispatcher.invoke("get_portfolios")))
    try:
        portfolio = new_portfolio_from(fields, data, SystemClock())
    except ValidationError as exc:
        raise CliError(f"Invalid portfolio in {args.file}: {exc}") from exc

    payload = {"portfolio": portfolio.model_dump(mode="json")}
    saved = PortfolioData.model_validate(_unwrap(dispatcher.invoke("save_portfolio", payload)))
    _emit(saved.find(portfolio.id).model_dump(mode="json"))
    return 0


def cmd_delete(dispatcher: CommandDispatcher, args: argparse.Namespace) -> int:
    _emit(_unwrap(dispatcher.invoke("delete_portfolio", {"id": args.id})))
    return 0


def cmd_export(dispatcher: CommandDispatcher, args: argparse.Namespace) -> int:
    portfolio = _find(dispatcher, args.id)
    content = _read_text(args.content) if args.content else render_markdown(portfolio)
    payload = {"data": {"portfolio": portfolio.model_dump(mode="json"), "content": content}}
    _emit(_unwrap(dispatcher.invoke("export_markdown", payload)))
    return 0


def cmd_info(dispatcher: CommandDispatcher, args: argparse.Namespace) -> int:
    _emit(_unwrap(dispatcher.invoke("get_app_info")))
    return 0


COMMANDS: dict[str, Callable[[CommandDispatcher, argparse.Namespace], int]] = {
    "list": cmd_list,
    "show": cmd_show,
    "add": cmd_add,
    "delete": cmd_delete,
    "export": cmd_export,
    "info": cmd_info,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint wrapper compatible with setuptools scripts."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        cfg = load_app_config(args)
        logging.basicConfig(level=cfg.log_level, format=LOG_FORMAT, stream=sys.stderr)
        repository = build_repository(cfg, telemetry=_build_telemetry(cfg))
        return COMMANDS[args.command](CommandDispatcher(repository), args)
    except (CliError, PortfolioStoreError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
