#!/usr/bin/env python3
"""
Command-line script to generate llms.txt for a website.

Reads llms-config.json, walks the configured sitemap, converts technical
documentation pages to .html.md files and writes <web_root>/llms.txt.

Usage:
    python run_llmscan.py
    python run_llmscan.py --config /etc/llmscan/site.json
    python run_llmscan.py --force-refresh
    python run_llmscan.py --log-mode console -v

Exit status is 0 when the run completes (even if every page was skipped)
and 1 on a setup failure: config, directories, API key, sitemap or index.
"""

import argparse
import logging
import os
import sys

# Load .env file automatically
from dotenv import load_dotenv

from llmscan.config import load_config, load_api_key
from llmscan.exceptions import ConfigError, FatalError, LLMClientError
from llmscan.llm_client import LLMClient
from llmscan.logger import LOG_MODES, setup_logger
from llmscan.main import LLMScanner

# Environment variables a web server sets for CGI requests
WEB_REQUEST_ENV_VARS = ("GATEWAY_INTERFACE", "REQUEST_METHOD")


def running_under_web_server() -> bool:
    return any(os.environ.get(name) for name in WEB_REQUEST_ENV_VARS)


def deny_web_request() -> int:
    """Emit a CGI 403 response instead of running the scan."""
    sys.stdout.write(
        "Status: 403 Forbidden\r\n"
        "Content-Type: text/plain\r\n"
        "\r\n"
        "Access denied. This tool can only be run from the command line.\n"
    )
    sys.stdout.flush()
    return 1


def main(argv=None) -> int:
    if running_under_web_server():
        return deny_web_request()

    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Generate llms.txt and Markdown documentation from a sitemap"
    )
    parser.add_argument(
        "--config", "-c",
        help="Config file (default: $LLMSCAN_CONFIG or ./llms-config.json)"
    )
    parser.add_argument(
        "--force-refresh", "-f",
        action="store_true",
        help="Ignore cached .html.md files and re-evaluate every page"
    )
    parser.add_argument(
        "--log-mode",
        choices=LOG_MODES,
        help="Override the config's log_mode"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.log_mode:
        config = config.model_copy(update={"log_mode": args.log_mode})

    # Directories first: the log file may live in one of them
    try:
        config.ensure_directories()
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger(
        mode=config.log_mode,
        log_file=str(config.log_file) if config.log_file else None,
        level=log_level
    )

    try:
        api_key = load_api_key(config)
        llm_client = LLMClient.create(config.ai_engine, api_key=api_key)
    except (ConfigError, LLMClientError) as e:
        logger.error(f"Error: {e.message}")
        return 1

    scanner = LLMScanner(config, llm_client, logger=logger, force_refresh=args.force_refresh)

    try:
        scanner.run()
    except FatalError as e:
        logger.error(f"Error: {e.message}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
