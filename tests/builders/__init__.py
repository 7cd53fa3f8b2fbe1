"""Test data builders for Gitflow Finish tests

This module provides builder pattern helpers for creating test data.
Builders simplify test setup and improve readability by providing fluent
interfaces with sensible defaults.

Example usage:
    config = ConfigBuilder()
        .without_merge()
        .build()
"""

from tests.builders.config_builder import ConfigBuilder
from tests.builders.pr_data_builder import PRDataBuilder

__all__ = [
    "ConfigBuilder",
    "PRDataBuilder",
]
