#!/usr/bin/env python3
"""
Product Browser - Main entry point
"""
import argparse
import logging
import os
import sys
from pathlib import Path

# Add the parent directory to sys.path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from simple_logger import Slogger
from product_browser.config import VIEWS, load_config, validate_config
from product_browser.errors import ConfigError
from product_browser.ui.app import ProductBrowserApp

logger = logging.getLogger("product_browser.main")


def setup_logging_config(log_level_str: str, log_file_path: Path):
    """Route stdlib logging (the paging core) to the same log directory as Slogger."""
    numeric_log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(
        level=numeric_log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(log_file_path, mode='w')]
    )
    logger.info(f"Logging configured. Level: {log_level_str}. File: {log_file_path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Browse a large product table in the terminal")
    parser.add_argument("--config", help="JSON config file. Default: ~/.product_browser_config.json")
    parser.add_argument("--db", help="SQLite database path (':memory:' for a throwaway database)")
    parser.add_argument("--rows", type=int, help="Number of products to generate when the database is empty")
    parser.add_argument("--latency-ms", type=int, help="Simulated latency per on-demand page fetch")
    parser.add_argument("--log-level", choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help="Logging level")
    parser.add_argument("--view", choices=VIEWS, help="View shown at startup")
    return parser


def apply_args(config: dict, args: argparse.Namespace) -> dict:
    """Command-line options win over the file and the environment."""
    if args.db:
        config["sqlite"]["db_path"] = args.db
    if args.rows is not None:
        config["dataset"]["rows"] = args.rows
    if args.latency_ms is not None:
        config["api"]["latency_ms"] = args.latency_ms
    if args.log_level:
        config["logging"]["level"] = args.log_level
    if args.view:
        config["ui"]["default_view"] = args.view
    validate_config(config)
    return config


def main(argv=None):
    args = build_parser().parse_args(argv)

    try:
        config = apply_args(load_config(args.config), args)
    except ConfigError as e:
        print(f"ERROR: Configuration problem - {e}", file=sys.stderr)
        return 1

    log_cfg = config["logging"]
    Slogger.configure(log_cfg["log_path"], log_cfg["level"])
    setup_logging_config(log_cfg["level"], Path(log_cfg["log_path"]).with_name("paging.log"))

    Slogger.log("Starting Product Browser application...", context={
        "db_path": config["sqlite"]["db_path"],
        "view": config["ui"]["default_view"],
    })

    # Create and run the application
    app = ProductBrowserApp(config)
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
