"""Campaign Forge - item forge, monster builder and rules text engine."""

__version__ = "0.1.0"
