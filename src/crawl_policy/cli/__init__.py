"""
CLI module for the crawl policy engine.

Provides command-line interface using Typer:
- presets: List catalog policies
- show: Explain a single policy
- config: Configuration management
"""

from crawl_policy.cli.main import app

__all__ = ["app"]
