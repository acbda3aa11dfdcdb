"""Formatting helpers, sliding averages and a reloadable YAML configuration."""

__version__ = "0.0.1"
__all__ = ["average", "config", "fmt"]