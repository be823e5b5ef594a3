"""rnclean — cleanup-and-reinstall orchestrator for React Native projects."""

__version__ = "0.1.0"
