"""Release note patcher for file-server distributions."""

__version__ = "0.3.0"
