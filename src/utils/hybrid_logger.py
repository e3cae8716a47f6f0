import logging
import sys
import traceback
from contextlib import suppress
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, List, Optional


class ColoredFormatter(logging.Formatter):
    """Bracketed line format, ANSI colored on the console only"""

    COLORS = {
        'DEBUG': '\033[94m',    # Blue
        'INFO': '\033[92m',     # Green
        'WARNING': '\033[93m',  # Yellow
        'ERROR': '\033[91m',    # Red
        'CRITICAL': '\033[95m', # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = False):
        self.use_colors = use_colors
        # Format: [time.ms] [level] [class] message
        super().__init__(
            '[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(class_name)s] %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        )

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'class_name'):
            record.class_name = 'Main'

        formatted = super().format(record)
        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            formatted = f"{color}{formatted}{self.COLORS['RESET']}"
        return formatted


def describe_exception(message: str, exception: BaseException) -> str:
    """Append exception type and the innermost frame to a log message"""
    tb = traceback.extract_tb(exception.__traceback__)
    filename, lineno = (tb[-1].filename, tb[-1].lineno) if tb else ("unknown", 0)
    return f"{message} | Type: {type(exception).__name__} | File: {filename} | Line: {lineno}"


class ClassLogger:
    """
    Per-class view on the shared installation logger.

    All class loggers write through the same handlers; each one only
    filters by its own level and stamps its class name on the record.
    """

    def __init__(self, main_logger: logging.Logger, class_name: str, level: int):
        self.main_logger = main_logger
        self.class_name = class_name
        self.level = level

    def is_enabled_for(self, level: int) -> bool:
        return level >= self.level

    def _log(self, level: int, message: str, exception: Optional[BaseException] = None) -> None:
        if not self.is_enabled_for(level):
            return
        exc_info = None
        if exception is not None:
            exc_info = (type(exception), exception, exception.__traceback__)
        record = self.main_logger.makeRecord(
            self.main_logger.name, level, "", 0, message, (), exc_info
        )
        record.class_name = self.class_name
        self.main_logger.handle(record)

    def create_class_logger(self, class_name: str, level: Optional[int] = None) -> 'ClassLogger':
        """
        Create a sibling logger for another class sharing the same handlers.

        Args:
            class_name: Name shown in the [class] column
            level: Minimum level, defaults to this logger's level
        """
        return ClassLogger(self.main_logger, class_name, self.level if level is None else level)

    def debug(self, message: str) -> None:
        self._log(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def warning(self, message: str, exception: Optional[BaseException] = None) -> None:
        """Log a warning; an exception adds its type and location but no traceback"""
        if exception is not None:
            message = describe_exception(message, exception)
        self._log(logging.WARNING, message)

    def error(self, message: str, exception: Optional[BaseException] = None) -> None:
        """Log an error with optional exception details and traceback, then flush"""
        if exception is not None:
            self._log(logging.ERROR, describe_exception(message, exception), exception)
        else:
            self._log(logging.ERROR, message)
        self.flush()

    def critical(self, message: str) -> None:
        self._log(logging.CRITICAL, message)
        self.flush()

    def flush(self) -> None:
        """Flush every handler of the shared logger"""
        for handler in self.main_logger.handlers:
            with suppress(OSError, ValueError):
                handler.flush()


class HybridLogger:
    """
    Logger factory for the installation.

    One file per run under `log_dir` (size-bounded with rotation, older
    runs pruned) plus an optional colored console stream.
    """

    def __init__(self,
                 name: str = "app",
                 log_dir: str = "logs",
                 console: bool = True,
                 max_bytes: int = 5 * 1024 * 1024,
                 backup_count: int = 3,
                 keep_runs: int = 20):
        self.name = name
        self.log_dir = Path(log_dir)
        self.console = console
        self.max_bytes = max_bytes
        self.backup_count = backup_count
        self.keep_runs = keep_runs
        self.log_file: Optional[Path] = None
        self.main_logger: Optional[logging.Logger] = None
        self.class_loggers: Dict[str, ClassLogger] = {}
        self._setup_main_logger()

    def _setup_main_logger(self) -> None:
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prune_old_runs()

        self.log_file = self.log_dir / f"{self.name}_{datetime.now().strftime('%Y-%m-%d_%H-%M-%S')}.log"

        self.main_logger = logging.getLogger(self.name)
        self.main_logger.setLevel(logging.DEBUG)
        self.main_logger.propagate = False
        self.main_logger.handlers.clear()

        if self.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ColoredFormatter(use_colors=True))
            self.main_logger.addHandler(console_handler)

        file_handler = RotatingFileHandler(
            self.log_file, maxBytes=self.max_bytes, backupCount=self.backup_count, encoding="utf-8"
        )
        file_handler.setFormatter(ColoredFormatter(use_colors=False))
        self.main_logger.addHandler(file_handler)

    def run_logs(self) -> List[Path]:
        """Log files of earlier runs with this name, oldest first"""
        return sorted(self.log_dir.glob(f"{self.name}_*.log"))

    def prune_old_runs(self) -> int:
        """
        Delete the oldest run logs (and their rotated parts) so that at most
        `keep_runs - 1` remain before this run starts.

        Returns:
            Number of runs removed
        """
        runs = self.run_logs()
        excess = len(runs) - max(0, self.keep_runs - 1)
        if excess <= 0:
            return 0
        for path in runs[:excess]:
            for part in [path] + list(self.log_dir.glob(f"{path.name}.*")):
                with suppress(OSError):
                    part.unlink()
        return excess

    def get_class_logger(self, class_name: str, level: int = logging.INFO) -> ClassLogger:
        """
        Get (or create) the logger of one class.

        Args:
            class_name: Name of the class for log identification
            level: Minimum log level, applied only when the logger is first created
        """
        if class_name not in self.class_loggers:
            self.class_loggers[class_name] = ClassLogger(self.main_logger, class_name, level)
        return self.class_loggers[class_name]

    def cleanup(self) -> None:
        """Flush and close every handler"""
        if self.main_logger:
            for handler in self.main_logger.handlers:
                with suppress(OSError, ValueError):
                    handler.flush()
                    handler.close()
            self.main_logger.handlers.clear()
