"""mdfix — auto-fix common markdownlint issues in place."""

__version__ = "0.1.0"
