"""Collaborators and ambient helpers (init system, runtime, logging, config)."""
