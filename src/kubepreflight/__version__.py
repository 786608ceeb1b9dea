"""Version information for kubepreflight"""

__version__ = "1.0.0"
__version_info__ = (1, 0, 0)
__release_date__ = "2026-10-16"


def get_full_version():
    """Get full version string with release date"""
    return f"{__version__} ({__release_date__})"
