"""Configuration-driven preprocessor for git history and matched files."""

__version__ = "0.4.0"
