"""GitHub CLI and API operations"""

import json
import os
import subprocess
from typing import Any, Dict, List, Optional

from gitflowfinish.domain.exceptions import GitHubAPIError


def run_command(
    cmd: List[str],
    check: bool = True,
    capture_output: bool = True,
    input: Optional[str] = None,
    env: Optional[Dict[str, str]] = None
) -> subprocess.CompletedProcess:
    """Run a command and return the result

    Args:
        cmd: Command and arguments as list
        check: Whether to raise exception on non-zero exit
        capture_output: Whether to capture stdout/stderr
        input: Text passed to the command on stdin
        env: Extra environment variables layered over the current environment

    Returns:
        CompletedProcess instance

    Raises:
        subprocess.CalledProcessError: If command fails and check=True
    """
    return subprocess.run(
        cmd,
        check=check,
        capture_output=capture_output,
        text=True,
        input=input,
        env={**os.environ, **env} if env else None
    )


def run_gh_command(
    args: List[str],
    token: Optional[str] = None,
    input: Optional[str] = None
) -> str:
    """Run a GitHub CLI command and return stdout

    Args:
        args: gh command arguments (without 'gh' prefix)
        token: Authentication token, handed to gh through GH_TOKEN
        input: Text passed to gh on stdin

    Returns:
        Command stdout as string

    Raises:
        GitHubAPIError: If gh command fails or gh is not installed
    """
    env = {"GH_TOKEN": token} if token else None
    try:
        result = run_command(["gh"] + args, input=input, env=env)
        return result.stdout.strip()
    except subprocess.CalledProcessError as e:
        # Keep the message on one line; stderr lines are joined with "; "
        detail = "; ".join(line.strip() for line in (e.stderr or "").splitlines() if line.strip())
        raise GitHubAPIError(f"GitHub CLI command failed: {' '.join(args)}: {detail}")
    except OSError as e:
        raise GitHubAPIError(f"Unable to run the GitHub CLI: {e}")


def gh_api_call(
    endpoint: str,
    method: str = "GET",
    body: Optional[Dict[str, Any]] = None,
    token: Optional[str] = None
) -> Dict[str, Any]:
    """Call GitHub REST API using gh CLI

    Args:
        endpoint: API endpoint path (e.g., "/repositories/1296269/pulls/42")
        method: HTTP method (GET, POST, DELETE, ...)
        body: JSON request body, sent on stdin
        token: Authentication token

    Returns:
        Parsed JSON response ({} for empty responses such as 204)

    Raises:
        GitHubAPIError: If API call fails or returns invalid JSON
    """
    args = ["api", endpoint, "--method", method]
    payload = None
    if body is not None:
        args.extend(["--input", "-"])
        payload = json.dumps(body)

    try:
        output = run_gh_command(args, token=token, input=payload)
        return json.loads(output) if output else {}
    except json.JSONDecodeError as e:
        raise GitHubAPIError(f"Invalid JSON from API: {str(e)}")


def is_not_found(error: GitHubAPIError) -> bool:
    """Whether a GitHubAPIError was caused by an HTTP 404 response"""
    text = str(error)
    return "HTTP 404" in text or "Not Found" in text
