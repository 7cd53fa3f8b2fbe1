"""Semantic version extraction from gitflow branch names

Branch names are matched against the semver 2.0 grammar (adapted from
https://semver.org/) behind a literal ``release/`` prefix. Which prefix
grammar applies is chosen by the caller through BranchGrammar.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from gitflowfinish.domain.constants import RELEASE_BRANCH_PREFIX

_NUMERIC = r"0|[1-9][0-9]*"
_PRERELEASE_IDENT = r"(?:0|[1-9][0-9]*|[0-9]*[a-zA-Z-][0-9a-zA-Z-]*)"
_BUILD_IDENT = r"[0-9a-zA-Z-]+"

_VERSION_PATTERN = (
    rf"(?P<major>{_NUMERIC})\.(?P<minor>{_NUMERIC})\.(?P<patch>{_NUMERIC})"
    rf"(?:-(?P<prerelease>{_PRERELEASE_IDENT}(?:\.{_PRERELEASE_IDENT})*))?"
    rf"(?:\+(?P<buildmetadata>{_BUILD_IDENT}(?:\.{_BUILD_IDENT})*))?"
)


class BranchGrammar(Enum):
    """Prefix grammar accepted in front of the version.

    OPTIONAL_V accepts both ``release/1.2.3`` and ``release/v1.2.3``;
    STRICT accepts only ``release/1.2.3``.
    """

    OPTIONAL_V = "optional-v"
    STRICT = "strict"

    @property
    def pattern(self) -> re.Pattern:
        prefix = re.escape(RELEASE_BRANCH_PREFIX)
        if self is BranchGrammar.OPTIONAL_V:
            prefix += "v?"
        return re.compile(prefix + _VERSION_PATTERN)


@dataclass(frozen=True)
class SemanticVersion:
    """Structured semantic version parsed from a branch name"""

    major: int
    minor: int
    patch: int
    prerelease: Optional[str] = None
    build_metadata: Optional[str] = None

    @property
    def full(self) -> str:
        """Canonical rendering used verbatim in tag names and messages"""
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += f"-{self.prerelease}"
        if self.build_metadata:
            text += f"+{self.build_metadata}"
        return text

    def __str__(self) -> str:
        return self.full


def parse_branch_version(
    branch_name: str,
    grammar: BranchGrammar = BranchGrammar.OPTIONAL_V
) -> Optional[SemanticVersion]:
    """Extract the semantic version encoded in a gitflow branch name

    A branch that does not follow the grammar is an expected situation
    (e.g. a plain feature branch), so the mismatch is reported as None
    rather than raised.

    Args:
        branch_name: Head branch name of the pull request
        grammar: Prefix grammar to match the branch against

    Returns:
        SemanticVersion if the whole branch name matches, None otherwise

    Examples:
        >>> parse_branch_version("release/v1.4.0").full
        '1.4.0'
        >>> parse_branch_version("release/v1.4.0", BranchGrammar.STRICT) is None
        True
        >>> parse_branch_version("release/01.2.3") is None
        True
    """
    match = grammar.pattern.fullmatch(branch_name)
    if match is None:
        return None

    return SemanticVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        prerelease=match.group("prerelease"),
        build_metadata=match.group("buildmetadata"),
    )


def format_release_branch(version: SemanticVersion, with_v: bool = True) -> str:
    """Render the release branch name for a version

    Args:
        version: Version to render
        with_v: Whether to put a ``v`` in front of the version

    Returns:
        Branch name such as ``release/v1.4.0``
    """
    return f"{RELEASE_BRANCH_PREFIX}{'v' if with_v else ''}{version.full}"
