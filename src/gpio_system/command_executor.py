"""
subprocess-backed executor for the libgpiod command line tools
"""

import subprocess
from typing import Sequence

from .exceptions import CommandExecutionError
from .interfaces import ICommandExecutor, IHeldProcess


class HeldProcess(IHeldProcess):
    """
    Wraps a Popen handle whose lifetime holds an output level.

    terminate() sends SIGTERM, waits up to `terminate_timeout_s`, then
    falls back to SIGKILL.
    """

    def __init__(self, process: subprocess.Popen, argv: Sequence[str], terminate_timeout_s: float):
        self._process = process
        self._argv = list(argv)
        self._terminate_timeout_s = terminate_timeout_s

    @property
    def pid(self) -> int:
        return self._process.pid

    def is_running(self) -> bool:
        return self._process.poll() is None

    def terminate(self) -> None:
        if self._process.poll() is not None:
            return
        self._process.terminate()
        try:
            self._process.wait(timeout=self._terminate_timeout_s)
        except subprocess.TimeoutExpired:
            self._process.kill()
            self._process.wait()

    def __repr__(self) -> str:
        return f"HeldProcess(pid={self._process.pid}, argv={self._argv})"


class CommandExecutor(ICommandExecutor):
    """
    Production executor.

    run() merges stderr into stdout because the line tools report
    errors and values on different streams depending on version.
    """

    def __init__(self, run_timeout_s: float = 1.0, terminate_timeout_s: float = 1.0):
        self._run_timeout_s = run_timeout_s
        self._terminate_timeout_s = terminate_timeout_s

    def run(self, argv: Sequence[str]) -> str:
        try:
            result = subprocess.run(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                timeout=self._run_timeout_s,
            )
        except subprocess.TimeoutExpired as e:
            raise CommandExecutionError(argv, f"timed out after {self._run_timeout_s}s") from e
        except OSError as e:
            raise CommandExecutionError(argv, f"launch failed: {e}") from e

        if result.returncode != 0:
            raise CommandExecutionError(argv, f"exit code {result.returncode}", result.stdout)
        return result.stdout

    def spawn_held(self, argv: Sequence[str]) -> HeldProcess:
        try:
            process = subprocess.Popen(
                list(argv),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise CommandExecutionError(argv, f"launch failed: {e}") from e

        # A holder that dies straight away (busy line, bad chip) never asserted the level
        returncode = process.poll()
        if returncode is not None:
            raise CommandExecutionError(argv, f"exited immediately with code {returncode}")

        return HeldProcess(process, argv, self._terminate_timeout_s)
