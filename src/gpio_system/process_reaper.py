"""
Shutdown fallback for gpioset holders that outlived their OutputLine
"""

import os
from typing import List

import psutil


class ProcessReaper:
    """
    Finds and stops orphaned line-holder processes.

    Normal shutdown terminates every holder through its OutputLine. This
    sweep catches the rest (a crashed earlier run, a holder that ignored
    SIGTERM): graceful terminate first, then kill whatever survives the
    timeout.
    """

    def __init__(self, logger, command: str = "gpioset", timeout_s: float = 1.0):
        self._logger = logger
        self._command_name = os.path.basename(command)
        self._timeout_s = timeout_s

    def find_orphans(self) -> List[psutil.Process]:
        orphans = []
        for process in psutil.process_iter(["name", "cmdline"]):
            try:
                name = process.info.get("name") or ""
                cmdline = process.info.get("cmdline") or []
                executable = os.path.basename(cmdline[0]) if cmdline else ""
                if self._command_name in (name, executable):
                    orphans.append(process)
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        return orphans

    def reap(self) -> int:
        """
        Terminate every orphaned holder.

        Returns:
            Number of processes that were found
        """
        orphans = self.find_orphans()
        if not orphans:
            self._logger.debug(f"No orphaned {self._command_name} processes")
            return 0

        self._logger.warning(f"Stopping {len(orphans)} orphaned {self._command_name} process(es)")
        for process in orphans:
            try:
                process.terminate()
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied as e:
                self._logger.warning(f"Cannot terminate pid {process.pid}: {e}")

        _, alive = psutil.wait_procs(orphans, timeout=self._timeout_s)
        for process in alive:
            try:
                process.kill()
                self._logger.warning(f"Killed pid {process.pid} after timeout")
            except psutil.NoSuchProcess:
                continue
            except psutil.AccessDenied as e:
                self._logger.warning(f"Cannot kill pid {process.pid}: {e}")

        return len(orphans)
