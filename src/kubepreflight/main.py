#!/usr/bin/env python3
"""
kubepreflight command line

Runs the preflight checks for a bootstrap phase and exits non-zero if
any check error survives the ignore list.

Usage:
    kubepreflight --phase init --config /etc/kubepreflight/config.yaml
    kubepreflight --phase join --ignore-preflight-errors=Swap,NumCPU
"""

import json
import logging
import sys

import click
from rich.markup import escape

from .__version__ import __version__, get_full_version
from .config.preflight_config import load_config
from .core.models import ConfigError, PreflightError, normalize_ignore_list
from .core.plan import PLANS
from .core.runner import run_checks
from .utils.console import get_console
from .utils.env_config import get_config, initialize_config, show_config_summary
from .utils.logging_config import level_from_name, setup_logging

logger = logging.getLogger(__name__)

EXIT_PREFLIGHT_FAILED = 1
EXIT_CONFIG_ERROR = 2


@click.command()
@click.option('--phase', type=click.Choice(sorted(PLANS)), default='init', show_default=True,
              help='Bootstrap phase to run checks for')
@click.option('--config', 'config_path', type=click.Path(dir_okay=False),
              help='Preflight configuration file (YAML)')
@click.option('--ignore-preflight-errors', 'ignore_errors', multiple=True,
              help="Checks whose errors become warnings, comma-separated; 'all' ignores every check")
@click.option('--isolate', is_flag=True,
              help='Keep running when a check crashes, reporting the crash as that check\'s error')
@click.option('--json', 'as_json', is_flag=True, help='Print per-check results as JSON')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Also write logs to this file')
@click.option('--show-config', is_flag=True, help='Show current configuration')
@click.option('--version', is_flag=True, help='Show version information')
def main(phase, config_path, ignore_errors, isolate, as_json, debug, log_file,
         show_config, version):
    """Run preflight checks before bootstrapping a cluster node."""
    console = get_console()
    initialize_config()

    level = logging.DEBUG if debug else level_from_name(get_config('PREFLIGHT_LOG_LEVEL'))
    setup_logging(level=level, log_file=log_file or get_config('PREFLIGHT_LOG_FILE') or None)

    if version:
        console.print(f"kubepreflight {get_full_version()}")
        return

    if show_config:
        show_config_summary()
        return

    try:
        config = load_config(config_path, required=bool(config_path))
    except ConfigError as e:
        get_console(stderr=True).print(f"[error]Configuration error:[/error] {escape(str(e))}")
        sys.exit(EXIT_CONFIG_ERROR)

    ignore_set = normalize_ignore_list(list(config.ignore_preflight_errors) + list(ignore_errors))
    isolate = isolate or config.isolate_checks

    checks = PLANS[phase](config)
    logger.debug(f"kubepreflight {__version__}: running {len(checks)} {phase} checks")

    if not as_json:
        console.print("[preflight] Running pre-flight checks", markup=False)

    results = []
    failure = None
    try:
        run_checks(checks, sys.stderr, ignore_set, isolate=isolate, results=results)
    except PreflightError as e:
        failure = e

    if as_json:
        click.echo(json.dumps({
            'phase': phase,
            'passed': failure is None,
            'checks': [r.to_dict() for r in results],
        }, indent=2))

    if failure is not None:
        click.echo(str(failure), err=True)
        sys.exit(EXIT_PREFLIGHT_FAILED)

    if not as_json:
        console.print("[success]All preflight checks passed[/success]")


if __name__ == '__main__':
    main()
