#!/usr/bin/env python3
"""
FitMap crawler entry point.

Usage:
    fitmap-scraper                       # All regions, all gyms
    fitmap-scraper --sample --debug      # Few pages and gyms per region
    fitmap-scraper --regions 1 13 27     # Subset of regions
"""

import argparse
import asyncio
import logging
import re
import sys

from runner.config import Settings, settings as default_settings


class ColorStripFormatter(logging.Formatter):
    """Formatter that strips ANSI color codes from log messages."""
    ansi_escape = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')

    def format(self, record):
        message = super().format(record)
        return self.ansi_escape.sub('', message)


def setup_logging(settings: Settings):
    """
    Configure root and crawler loggers.

    Console gets colors; the log file gets the same lines with colors stripped.
    """
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper())
    settings.log_dir.mkdir(exist_ok=True)

    file_handler = logging.FileHandler(settings.log_file, encoding='utf-8')
    file_handler.setFormatter(ColorStripFormatter(settings.log_format))

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(settings.log_format))

    logging.basicConfig(
        level=level,
        handlers=[file_handler, console_handler],
        force=True  # Override any existing configuration
    )

    # Crawler loggers get their own handlers so messages appear once
    crawler_logger = logging.getLogger('fitmap')
    crawler_logger.propagate = False
    crawler_logger.handlers.clear()
    crawler_logger.addHandler(file_handler)
    crawler_logger.addHandler(console_handler)
    crawler_logger.setLevel(level)

    # Playwright's asyncio debug output is noise at DEBUG
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='Crawl FitMap gym listings by prefecture')
    parser.add_argument('--sample', action='store_true',
                        help='Fetch a small sample (few pages and gyms per region)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--regions', type=int, nargs='+', metavar='ID',
                        help='Area ids to crawl (default: all 47)')
    parser.add_argument('--output-dir', type=str, help='Directory for YAML output')
    parser.add_argument('--no-export', action='store_true', help='Skip writing YAML files')
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace, base: Settings = default_settings) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    overrides = {}
    if args.sample:
        overrides['sample_mode'] = True
    if args.debug:
        overrides['debug'] = True
    if args.output_dir:
        overrides['output_dir'] = args.output_dir
    if args.no_export:
        overrides['export_enabled'] = False
    if args.headed:
        overrides['headless'] = False
    return base.model_copy(update=overrides)


async def main(argv=None) -> int:
    args = parse_args(argv)
    settings = build_settings(args)
    setup_logging(settings)

    # Imported after logging is configured
    from fitmap.manager import CrawlManager

    logger = logging.getLogger('fitmap.runner')
    mode = 'sample' if settings.sample_mode else 'full'
    logger.info(f"Starting FitMap crawl ({mode} mode)")

    try:
        manager = CrawlManager(settings, regions=args.regions)
        result = await manager.run()
    except Exception as e:
        logger.error(f"Run failed: {e}")
        return 1

    logger.info(f"Run summary: {result.to_dict()}")
    return 0


def cli():
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    cli()
