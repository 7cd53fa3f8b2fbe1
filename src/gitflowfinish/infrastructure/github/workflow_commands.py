"""Render log records as GitHub Actions workflow commands

Log lines are written so the Actions log viewer collapses related output
into groups and highlights warnings and errors.

See https://docs.github.com/en/actions/reference/workflow-commands-for-github-actions

Group scoping works like a log context: ``log_group(name)`` pushes a name
for the duration of a ``with`` block, LogContextFilter stamps it on each
record as ``record.group``, and WorkflowCommandFormatter turns changes of
that value into ``::group::`` / ``::endgroup::`` lines.
"""

from __future__ import annotations

import contextvars
import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

GROUP_ATTRIBUTE = "group"

_current_group: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "gitflowfinish_log_group", default=None
)


@dataclass(frozen=True)
class NoGroup:
    """No group is open in the output"""


@dataclass(frozen=True)
class InGroup:
    """A group named ``name`` is open in the output"""

    name: str


GroupState = Union[NoGroup, InGroup]


def group_open(name: str) -> str:
    return f"::group::{name}"


GROUP_CLOSE = "::endgroup::"


def level_prefix(levelno: int) -> str:
    """Map a logging level to its workflow command prefix

    Args:
        levelno: Numeric logging level of the record

    Returns:
        Prefix such as ``::warning::``, or an empty string for info and
        custom levels
    """
    if levelno == logging.DEBUG:
        return "::debug::"
    if levelno == logging.WARNING:
        return "::warning::"
    if levelno in (logging.ERROR, logging.CRITICAL):
        return "::error::"
    return ""


@contextmanager
def log_group(name: str) -> Iterator[None]:
    """Tag every record logged inside the block with a group name

    Leaving the block, normally or through an exception, restores the
    previous group, so records logged afterwards no longer carry it.

    Example:
        >>> with log_group("Initial Setup"):
        ...     logger.info("Fetching repository information")
    """
    token = _current_group.set(name)
    try:
        yield
    finally:
        _current_group.reset(token)


def current_group() -> Optional[str]:
    return _current_group.get()


class LogContextFilter(logging.Filter):
    """Stamp the active log group onto each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, GROUP_ATTRIBUTE):
            setattr(record, GROUP_ATTRIBUTE, _current_group.get())
        return True


class WorkflowCommandFormatter(logging.Formatter):
    """Formatter producing GitHub Actions workflow command lines

    Keeps track of the group currently open in the output. A record
    whose group differs from the open one closes it and/or opens the new
    one before the message line:

        NoGroup     + no group  -> message
        NoGroup     + group g   -> ::group::g, message
        InGroup(g)  + group g   -> message
        InGroup(g)  + group g2  -> ::endgroup::, ::group::g2, message
        InGroup(g)  + no group  -> ::endgroup::, message

    One instance serves one run; the state is not shared between runs.
    """

    def __init__(self):
        super().__init__()
        self.state: GroupState = NoGroup()

    def format(self, record: logging.LogRecord) -> str:
        group = getattr(record, GROUP_ATTRIBUTE, None) or None
        lines = self._transition(group)
        lines.append(level_prefix(record.levelno) + self._render_message(record))
        return "\n".join(lines)

    def close_group(self) -> Optional[str]:
        """Close the open group, if any

        Returns:
            ``::endgroup::`` when a group was open, None otherwise
        """
        if isinstance(self.state, InGroup):
            self.state = NoGroup()
            return GROUP_CLOSE
        return None

    def _transition(self, group: Optional[str]) -> List[str]:
        state = self.state
        lines = []

        if isinstance(state, InGroup):
            if group == state.name:
                return lines
            lines.append(GROUP_CLOSE)

        if group is None:
            self.state = NoGroup()
        else:
            lines.append(group_open(group))
            self.state = InGroup(group)
        return lines

    def _render_message(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            message = f"{message}\n{record.exc_text}"
        return message


class WorkflowCommandHandler(logging.StreamHandler):
    """Stream handler that owns a WorkflowCommandFormatter

    end_group() writes a trailing ``::endgroup::`` for a group that is
    still open, so output never ends inside an unterminated group.
    """

    def __init__(self, stream=None):
        super().__init__(stream if stream is not None else sys.stdout)
        self.setFormatter(WorkflowCommandFormatter())
        self.addFilter(LogContextFilter())

    def end_group(self) -> None:
        formatter = self.formatter
        if not isinstance(formatter, WorkflowCommandFormatter):
            return
        self.acquire()
        try:
            line = formatter.close_group()
            if line is not None:
                self.stream.write(line + self.terminator)
                self.flush()
        finally:
            self.release()

    def close(self) -> None:
        self.end_group()
        super().close()


def configure_logging(
    logger_name: str = "gitflowfinish",
    stream=None,
    level: int = logging.DEBUG
) -> WorkflowCommandHandler:
    """Install the workflow command handler on the package logger

    Replaces any WorkflowCommandHandler installed by an earlier call so
    repeated configuration never duplicates lines.

    Args:
        logger_name: Logger to configure
        stream: Output stream (defaults to stdout, which the Actions runner captures)
        level: Minimum level to emit

    Returns:
        The installed handler
    """
    logger = logging.getLogger(logger_name)
    for existing in list(logger.handlers):
        if isinstance(existing, WorkflowCommandHandler):
            logger.removeHandler(existing)
            existing.close()

    handler = WorkflowCommandHandler(stream)
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return handler


def end_open_groups(logger_name: str = "gitflowfinish") -> None:
    """Close any group left open by the handlers of a logger"""
    for handler in logging.getLogger(logger_name).handlers:
        if isinstance(handler, WorkflowCommandHandler):
            handler.end_group()
