"""Deploy checklist: release checklist bookkeeping on GitHub issues."""

__version__ = "0.1.0"
