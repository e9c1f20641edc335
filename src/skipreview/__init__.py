"""AI-assisted skip-review labeling for low-risk pull requests."""

__version__ = "0.1.0"
