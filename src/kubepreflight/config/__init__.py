from .preflight_config import PreflightConfig, load_config

__all__ = ['PreflightConfig', 'load_config']
