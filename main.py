"""
main.py — CLI entry point for managing SEO option namespaces.

Usage:
  python main.py --init-db              Create the options table
  python main.py --ensure               Store the default-filled options if no row exists
  python main.py --get KEY              Print one option
  python main.py --set KEY VALUE        Validate and store one option
  python main.py --show [KEY ...]       Print all (or some) options
  python main.py --defaults             Print the schema defaults
  python main.py --reset                Overwrite the stored row with the defaults
  python main.py --report [PATH]        Write a JSON options report

Add --secondary to work on the secondary (network) namespace.
"""

import argparse
import json
import logging
import os
import sys

import yaml
from dotenv import load_dotenv

from options.exceptions import OptionError

load_dotenv()

# ── Logging setup ─────────────────────────────────────────────────────────────
logger = logging.getLogger("main")


def setup_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
            logging.FileHandler("options.log", encoding="utf-8"),
        ],
    )


# ── Config loader ─────────────────────────────────────────────────────────────

def load_config(path: str = None) -> dict:
    path = path or os.getenv("OPTIONS_CONFIG", "config.yaml")
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def build_service(config: dict, secondary: bool = False, db_path: str = None):
    """Wire the schema, SQLite backend and validation helper into a service."""
    from options.schema import build_options_config
    from options.service import OptionsService, SecondaryContextOptionsService
    from storage.option_rows import SqliteOptionsBackend
    from validation.helper import ValidationHelper

    options_config = build_options_config(config)
    backend        = SqliteOptionsBackend(db_path=db_path)
    service_cls    = SecondaryContextOptionsService if secondary else OptionsService
    return service_cls(options_config, backend, ValidationHelper())


def _print_json(value) -> None:
    print(json.dumps(value, indent=2, ensure_ascii=False, default=str))


# ── Commands ──────────────────────────────────────────────────────────────────

def run_command(args: argparse.Namespace) -> int:
    if args.init_db:
        from storage.db import init_db
        init_db()
        return 0

    config  = load_config(args.config)
    service = build_service(config, secondary=args.secondary)

    if args.ensure:
        if service.ensure_initialized():
            logger.info("Options stored under %s", service.backend_key)
        else:
            logger.info("Options row %s already exists — nothing to do", service.backend_key)

    elif args.get is not None:
        _print_json(service.get(args.get))

    elif args.set is not None:
        key, value = args.set
        service.set(key, value)
        _print_json({key: service.get(key)})

    elif args.show is not None:
        _print_json(service.get_many(args.show))

    elif args.defaults:
        _print_json(service.get_defaults())

    elif args.reset:
        service.reset_to_defaults()
        service.clear_cache()

    elif args.report is not None:
        from reports.options_report import write_options_report
        path = write_options_report(service, args.report or None)
        print(path)

    return 0


# ── CLI ───────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SEO options — schema-driven settings store")
    parser.add_argument("--config", default=None, help="Path to the options config (default: config.yaml)")
    parser.add_argument(
        "--secondary",
        action="store_true",
        help="Use the secondary (network) namespace, without site-only options",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--init-db", action="store_true", help="Create the options table only")
    group.add_argument("--ensure", action="store_true", help="Store default-filled options if no row exists")
    group.add_argument("--get", metavar="KEY", help="Print a single option")
    group.add_argument("--set", nargs=2, metavar=("KEY", "VALUE"), help="Validate and store an option")
    group.add_argument("--show", nargs="*", metavar="KEY", help="Print all options, or only the given keys")
    group.add_argument("--defaults", action="store_true", help="Print the schema defaults")
    group.add_argument("--reset", action="store_true", help="Overwrite the stored options with the defaults")
    group.add_argument("--report", nargs="?", const="", metavar="PATH", help="Write a JSON options report")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        return run_command(args)
    except OptionError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
