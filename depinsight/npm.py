"""Thin wrapper around the npm command line.

Every report except size and unused-dependency detection starts from
``npm <subcommand> --json``.
"""

import json
import subprocess
from pathlib import Path
from typing import Any

from depinsight import DepInsightError
from depinsight.logging import logger


class NpmError(DepInsightError):
    """npm could not be run or returned unusable output."""

    def __init__(self, message: str, stdout: str = "", stderr: str = "") -> None:
        super().__init__(message)
        self.stdout = stdout
        self.stderr = stderr


class NpmRunner:
    """Runs npm subcommands inside a project directory.

    ``npm audit`` and ``npm outdated`` exit non-zero when they find
    something, so JSON on stdout is accepted regardless of the exit code.
    """

    def __init__(
        self,
        cwd: Path | str,
        executable: str = "npm",
        timeout: float | None = 300,
    ) -> None:
        self.cwd = Path(cwd)
        self.executable = executable
        self.timeout = timeout

    def run(self, *args: str) -> str:
        """Run ``npm <args>`` and return stdout.

        Raises:
            NpmError: If npm is missing, times out, or exits non-zero.
        """
        result = self._exec(list(args))
        if result.returncode != 0:
            raise NpmError(
                f"npm {' '.join(args)} failed with exit code {result.returncode}",
                stdout=result.stdout,
                stderr=result.stderr,
            )
        return result.stdout

    def run_json(self, *args: str) -> Any:
        """Run ``npm <args> --json`` and parse stdout.

        Raises:
            NpmError: If stdout is not JSON (whatever the exit code).
        """
        argv = [*args, "--json"]
        result = self._exec(argv)
        stdout = result.stdout.strip()
        if not stdout:
            if result.returncode != 0:
                raise NpmError(
                    f"npm {' '.join(argv)} failed with exit code {result.returncode}",
                    stdout=result.stdout,
                    stderr=result.stderr,
                )
            return {}
        try:
            data = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise NpmError(
                f"npm {' '.join(argv)} returned invalid JSON: {e}",
                stdout=result.stdout,
                stderr=result.stderr,
            ) from e
        if result.returncode != 0:
            logger.debug("npm %s exited %d with JSON output", " ".join(argv), result.returncode)
        return data

    def _exec(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        cmd = [self.executable, *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.cwd)
        try:
            return subprocess.run(
                cmd,
                cwd=self.cwd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise NpmError(f"npm executable not found: {self.executable}") from e
        except subprocess.TimeoutExpired as e:
            raise NpmError(f"{' '.join(cmd)} timed out after {self.timeout}s") from e

    # Subcommands

    def list_tree(self) -> dict[str, Any]:
        """Full resolved tree (``npm ls --all --json``)."""
        data = self.run_json("ls", "--all")
        return data if isinstance(data, dict) else {}

    def audit(self) -> dict[str, Any]:
        data = self.run_json("audit")
        return data if isinstance(data, dict) else {}

    def outdated(self) -> dict[str, Any]:
        data = self.run_json("outdated")
        return data if isinstance(data, dict) else {}

    def install(self, name: str, version: str | None = None) -> str:
        spec = f"{name}@{version}" if version else name
        return self.run("install", spec)

    def uninstall(self, name: str) -> str:
        return self.run("uninstall", name)

    def cache_clean(self) -> str:
        return self.run("cache", "clean", "--force")
