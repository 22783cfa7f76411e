"""Day planning with task estimates, actual time tracking, TOML snapshots and text rendering."""

__version__ = "0.1.0"
__all__ = ["task", "storage", "text", "layout", "render"]