"""Process sources -- where discovery gets its raw listings from.

A source answers two questions with line-oriented text: which groups are
active, and which processes run inside a given group.  Any failure is
reported as :class:`~hivewatch.errors.DiscoveryError`.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from hivewatch.errors import DiscoveryError

logger = logging.getLogger(__name__)

_LIST_SESSIONS_FORMAT = "#{session_name}"
_LIST_PANES_FORMAT = "#{pane_pid} #{pane_current_path} #{pane_current_command}"


class ProcessSource(Protocol):
    """Line-oriented view of externally running process groups."""

    def list_groups(self) -> str: ...

    def list_processes(self, group: str) -> str: ...


class TmuxSource:
    """Reads sessions and panes from a local tmux server.

    Parameters:
        binary: tmux executable name or path.
        timeout: Seconds allowed per tmux invocation.
    """

    def __init__(self, binary: str = "tmux", timeout: float = 2.0) -> None:
        self._binary = binary
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def list_groups(self) -> str:
        return self._run(["list-sessions", "-F", _LIST_SESSIONS_FORMAT])

    def list_processes(self, group: str) -> str:
        return self._run(["list-panes", "-t", group, "-F", _LIST_PANES_FORMAT])

    def _run(self, args: list[str]) -> str:
        cmd = [self._binary, *args]
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self._timeout,
                check=True,
            )
        except subprocess.TimeoutExpired as exc:
            raise DiscoveryError(
                f"{' '.join(cmd)} timed out after {self._timeout}s", command=cmd
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise DiscoveryError(
                f"{' '.join(cmd)} exited {exc.returncode}",
                command=cmd,
                details={"stderr": _decode(exc.stderr).strip()},
            ) from exc
        except OSError as exc:
            # Missing or non-executable binary.
            raise DiscoveryError(
                f"cannot run {self._binary}: {exc}", command=cmd, retryable=False
            ) from exc
        return _decode(result.stdout)


def _decode(output: bytes | str | None) -> str:
    """Decode tmux output; paths are not guaranteed to be valid UTF-8."""
    if isinstance(output, str):
        return output
    return (output or b"").decode("utf-8", errors="replace")
