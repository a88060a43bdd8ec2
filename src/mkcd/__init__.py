"""mkcd - create a directory and prepare it as a ready-to-use workspace."""

__version__ = "1.0.0"
