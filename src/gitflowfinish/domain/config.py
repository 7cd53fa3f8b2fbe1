"""Configuration file loading and validation

NOTE: load_config performs file I/O, which strictly belongs in the
infrastructure layer. It lives here next to the validation it feeds.
"""

import os
import re
from typing import Any, Dict, Optional, Tuple

import yaml

from gitflowfinish.domain.exceptions import ConfigurationError

_REPOSITORY_NAME = re.compile(r"(?P<owner>[\w.-]+)/(?P<repo>[\w.-]+)", re.ASCII)

# YAML key -> WorkflowConfig field
_FILE_KEYS = {
    "mergeIntoDevelopment": "merge_into_development",
    "developmentBranchName": "development_branch_name",
    "deleteSourceBranch": "delete_source_branch",
    "tagPrefix": "tag_prefix",
    "allowVPrefix": "allow_v_prefix",
}

_BOOLEAN_FIELDS = {"merge_into_development", "delete_source_branch", "allow_v_prefix"}


def parse_repository_name(full_name: str) -> Tuple[str, str]:
    """Split an ``owner/repo`` repository name

    Args:
        full_name: Repository name as passed on the command line

    Returns:
        Tuple of (owner, repo)

    Raises:
        ConfigurationError: If the name is not of the form owner/repo
    """
    match = _REPOSITORY_NAME.fullmatch(full_name or "")
    if match is None:
        raise ConfigurationError(
            'Invalid repository name passed; repository name should be of format "owner/repo-name"'
        )
    return match.group("owner"), match.group("repo")


def load_config(file_path: str) -> Dict[str, Any]:
    """Load the optional YAML configuration file

    Args:
        file_path: Path to YAML configuration file (.yml or .yaml)

    Returns:
        Mapping of WorkflowConfig field names to values

    Raises:
        ConfigurationError: If the file is missing, is invalid YAML or has unknown keys
    """
    if not os.path.exists(file_path):
        raise ConfigurationError(f"Configuration file not found: {file_path}")

    with open(file_path, "r") as f:
        content = f.read()
    return load_config_from_string(content, file_path)


def load_config_from_string(content: str, source_name: str = "config") -> Dict[str, Any]:
    """Load YAML configuration from string content

    Args:
        content: YAML content as string
        source_name: Name of the source (for error messages)

    Returns:
        Mapping of WorkflowConfig field names to values

    Raises:
        ConfigurationError: If content is invalid YAML, not a mapping or has unknown keys
    """
    try:
        raw = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {source_name}: {str(e)}")

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Expected a mapping at the top level of {source_name}")

    unknown = sorted(set(raw) - set(_FILE_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Unknown configuration keys in {source_name}: {', '.join(unknown)}. "
            f"Supported keys: {', '.join(_FILE_KEYS)}"
        )

    config = {}
    for key, value in raw.items():
        field_name = _FILE_KEYS[key]
        if field_name in _BOOLEAN_FIELDS and not isinstance(value, bool):
            raise ConfigurationError(f"'{key}' in {source_name} must be true or false")
        if field_name not in _BOOLEAN_FIELDS:
            value = "" if value is None else str(value)
        config[field_name] = value
    return config


def pick(*values: Optional[Any], default: Any) -> Any:
    """Return the first value that is not None, else default

    Used to layer command-line flags over file settings over defaults.
    """
    for value in values:
        if value is not None:
            return value
    return default
