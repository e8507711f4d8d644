#!/usr/bin/env python3
"""Thin wrapper around the git executable for clone, update and push."""

from __future__ import annotations

import os
import subprocess
import tempfile
from dataclasses import dataclass
from typing import Dict, List, Optional, Type

from errors import CloneFailed, GitCommandFailed, PushFailed, UpdateFailed
from logging_utils import Logger
from security import SecurityValidator


@dataclass
class GitCredentials:
    """Username/password pair handed to git through GIT_ASKPASS."""
    username: str
    password: str


class GitRunner:
    """Runs git commands, capturing combined stdout/stderr.

    A non-zero exit status is the only failure signal; output is kept for
    diagnostics and never parsed.
    """

    def __init__(self, timeout_s: Optional[float] = None, git: str = "git") -> None:
        self.timeout_s = timeout_s
        self.git = git

    def clone_mirror(
        self, url: str, dest: str, credentials: Optional[GitCredentials] = None
    ) -> str:
        Logger.info(f"cloning {url} into {dest}")
        return self._run(
            ["clone", "--mirror", url, dest], CloneFailed, credentials
        )

    def remote_update(
        self,
        dest: str,
        remote_name: str = "origin",
        credentials: Optional[GitCredentials] = None,
    ) -> str:
        Logger.info(f"updating remote {remote_name} in {dest}")
        return self._run(
            ["-C", dest, "remote", "update", "--prune", remote_name],
            UpdateFailed,
            credentials,
        )

    def push_mirror(
        self,
        dest: str,
        remote_name: str,
        credentials: Optional[GitCredentials] = None,
    ) -> str:
        Logger.info(f"pushing to {remote_name}")
        output = self._run(
            ["-C", dest, "push", "--mirror", remote_name], PushFailed, credentials
        )
        Logger.debug(f"pushed, {output.strip()}")
        return output

    def _run(
        self,
        args: List[str],
        failure: Type[GitCommandFailed],
        credentials: Optional[GitCredentials] = None,
    ) -> str:
        cmd = [self.git, *args]
        Logger.debug(f"run {' '.join(cmd)}")
        env = os.environ.copy()
        askpass_script: Optional[str] = None
        try:
            if credentials is not None:
                askpass_script = self._create_askpass_script(
                    credentials.username, credentials.password
                )
                env.update(self._askpass_env(askpass_script))
            result = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                timeout=self.timeout_s,
                env=env,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            output = e.output or ""
            if isinstance(output, bytes):
                output = output.decode("utf-8", errors="replace")
            raise failure(
                cmd,
                SecurityValidator.sanitize_for_logging(
                    f"{output}\ntimed out after {self.timeout_s}s"
                ),
            ) from e
        except OSError as e:
            raise failure(cmd, f"cannot execute {self.git}: {e}") from e
        finally:
            self._cleanup_askpass_script(askpass_script)

        output = result.stdout or ""
        if result.returncode != 0:
            raise failure(cmd, SecurityValidator.sanitize_for_logging(output))
        return output

    @staticmethod
    def _askpass_env(script: str) -> Dict[str, str]:
        return {"GIT_ASKPASS": script, "GIT_TERMINAL_PROMPT": "0"}

    @staticmethod
    def _create_askpass_script(username: str, password: str) -> str:
        """Create a temporary askpass script for credential injection."""
        fd, path = tempfile.mkstemp(prefix="gitmirror_askpass_", text=True)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as script:
                script.write("#!/bin/sh\n")
                script.write("case \"$1\" in\n")
                script.write(f"  *Username*) echo '{username}' ;;\n")
                script.write(f"  *Password*) echo '{password}' ;;\n")
                script.write("  *) exit 1 ;;\n")
                script.write("esac\n")
            os.chmod(path, 0o700)
        except Exception:
            os.unlink(path)
            raise
        return path

    @staticmethod
    def _cleanup_askpass_script(path: Optional[str]) -> None:
        if not path:
            return
        try:
            if os.path.exists(path):
                os.remove(path)
        except OSError as error:
            Logger.security_event(
                "ASKPASS_CLEANUP_FAILED",
                f"failed to remove temporary credential helper: {error}",
            )
