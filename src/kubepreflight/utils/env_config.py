"""Environment configuration loader and validator"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import dotenv_values
from rich.table import Table

from .console import get_console

ENV_PREFIX = 'PREFLIGHT_'

# Default configuration values
DEFAULTS = {
    # Preflight config file (YAML)
    'PREFLIGHT_CONFIG_PATH': '/etc/kubepreflight/config.yaml',

    # Logging
    'PREFLIGHT_LOG_LEVEL': 'WARNING',
    'PREFLIGHT_LOG_FILE': '',

    # Checks
    'PREFLIGHT_IGNORE_ERRORS': '',
    'PREFLIGHT_ISOLATE_CHECKS': 'false',
    'PREFLIGHT_MIN_CPUS': '2',

    # Container runtime
    'PREFLIGHT_CRI_SOCKET': 'unix:///var/run/containerd/containerd.sock',
    'PREFLIGHT_IMAGE_PULL_POLICY': 'IfNotPresent',
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_PULL_POLICIES = ['Never', 'IfNotPresent', 'Always']


def find_env_file() -> Optional[Path]:
    """Find the .env file in standard locations"""
    search_paths = [
        Path.cwd() / '.env',
        Path('/etc/kubepreflight/.env'),
        Path.home() / '.kubepreflight.env',
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


def load_env_file(env_path: Optional[Path] = None) -> Dict[str, str]:
    """Load PREFLIGHT_* variables from a .env file

    Variables already set in the environment win over the file.

    Args:
        env_path: Optional path to .env file. If None, auto-discovers.

    Returns:
        Dictionary of variables taken from the file
    """
    loaded_vars = {}

    if env_path is None:
        env_path = find_env_file()

    if env_path is None or not env_path.exists():
        return loaded_vars

    for key, value in dotenv_values(env_path).items():
        if not key.startswith(ENV_PREFIX) or value is None:
            continue
        if key not in os.environ:
            os.environ[key] = value
            loaded_vars[key] = value

    return loaded_vars


def get_config(key: str, default: Optional[str] = None) -> str:
    """Get configuration value from environment or defaults

    Priority:
    1. Environment variable
    2. Provided default
    3. Built-in default
    """
    if key in os.environ:
        return os.environ[key]
    if default is not None:
        return default
    return DEFAULTS.get(key, '')


def get_config_bool(key: str, default: bool = False) -> bool:
    """Get boolean configuration value"""
    value = get_config(key, str(default).lower())
    return value.lower() in ('true', 'yes', '1', 'on')


def get_config_int(key: str, default: int = 0) -> int:
    """Get integer configuration value"""
    try:
        return int(get_config(key, str(default)))
    except ValueError:
        return default


def get_config_list(key: str) -> List[str]:
    """Get a comma-separated configuration value as a list"""
    return [item.strip() for item in get_config(key).split(',') if item.strip()]


def validate_config() -> Dict[str, Any]:
    """Validate current configuration and return status"""
    results = {
        'valid': True,
        'warnings': [],
        'errors': [],
        'config': {}
    }

    log_level = get_config('PREFLIGHT_LOG_LEVEL').upper()
    if log_level not in VALID_LOG_LEVELS:
        results['errors'].append(f"Invalid PREFLIGHT_LOG_LEVEL: {log_level}")
        results['valid'] = False
    results['config']['log_level'] = log_level

    policy = get_config('PREFLIGHT_IMAGE_PULL_POLICY')
    if policy not in VALID_PULL_POLICIES:
        results['errors'].append(f"Invalid PREFLIGHT_IMAGE_PULL_POLICY: {policy}")
        results['valid'] = False
    results['config']['image_pull_policy'] = policy

    min_cpus = get_config_int('PREFLIGHT_MIN_CPUS', 2)
    if min_cpus < 1:
        results['warnings'].append(f"PREFLIGHT_MIN_CPUS below 1: {min_cpus}")
    results['config']['min_cpus'] = min_cpus

    config_path = Path(get_config('PREFLIGHT_CONFIG_PATH'))
    if not config_path.exists():
        results['warnings'].append(f"Config file does not exist: {config_path}")
    results['config']['config_path'] = str(config_path)

    results['config']['ignore_errors'] = get_config_list('PREFLIGHT_IGNORE_ERRORS')
    results['config']['isolate_checks'] = get_config_bool('PREFLIGHT_ISOLATE_CHECKS')

    return results


def show_config_summary():
    """Display current configuration summary"""
    console = get_console()
    table = Table(title="Current Configuration", show_header=True, header_style="bold cyan")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Source", style="yellow")

    for key in sorted(DEFAULTS.keys()):
        env_value = os.environ.get(key)
        if env_value is not None:
            table.add_row(key, env_value, "env")
        else:
            table.add_row(key, DEFAULTS[key], "default")

    console.print(table)

    env_file = find_env_file()
    if env_file:
        console.print(f"\n[dim]Loaded from: {env_file}[/dim]")
    else:
        console.print("\n[dim]No .env file found, using defaults[/dim]")


def initialize_config(env_path: Optional[Path] = None) -> Dict[str, Any]:
    """Load the .env file and validate the resulting configuration

    Call this at application startup
    """
    load_env_file(env_path)
    return validate_config()
