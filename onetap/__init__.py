"""OneTap check-in nodes for the workflow engine."""

__version__ = "0.1.0"
