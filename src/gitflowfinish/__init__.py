"""Gitflow Finish - finish gitflow release and feature branches from GitHub Actions"""

__version__ = "1.0.0"
