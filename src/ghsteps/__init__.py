"""ghsteps - GitHub REST API actions for automation pipelines."""

__version__ = "0.1.0"
