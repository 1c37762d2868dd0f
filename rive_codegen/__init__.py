"""Generate typed accessors for scene-graph assets from templates."""

__version__ = "0.1.0"
