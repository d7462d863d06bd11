"""Sprout - bootstrap new projects from GitHub-hosted templates."""

__version__ = "0.3.0"
