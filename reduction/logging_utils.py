"""
Logging handle shared by the pipeline and the reduction methods.

The handle is built once per run and passed explicitly to whoever needs to
log; nothing reads module-level logging state directly. Three switches are
kept: informational messages, debug messages and benchmark timings.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

LOGGER_NAMES = ('embedding', 'reduction')


@dataclass
class LoggingConfig:
    """Per-run logging switches plus the handler wiring they imply."""
    enable_info: bool = False
    enable_debug: bool = False
    enable_benchmark: bool = False

    def configure(self) -> "LoggingConfig":
        """Install the console handler on the package loggers and apply the switches."""
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
        for name in LOGGER_NAMES:
            logger = logging.getLogger(name)
            logger.handlers.clear()
            logger.addHandler(handler)
        self._apply_levels()
        return self

    def _apply_levels(self):
        if self.enable_debug:
            level = logging.DEBUG
        elif self.enable_info:
            level = logging.INFO
        else:
            level = logging.WARNING
        benchmark_level = logging.INFO if self.enable_benchmark else logging.WARNING

        for name in LOGGER_NAMES:
            logging.getLogger(name).setLevel(level)
            logging.getLogger(f"{name}.benchmark").setLevel(benchmark_level)

    def enable(self, info: bool = False, debug: bool = False, benchmark: bool = False):
        """Escalate the switches; they are never lowered during a run."""
        self.enable_info = self.enable_info or info
        self.enable_debug = self.enable_debug or debug
        self.enable_benchmark = self.enable_benchmark or benchmark
        self._apply_levels()

    @property
    def show_progress(self) -> bool:
        return self.enable_info or self.enable_debug

    @contextmanager
    def timed(self, stage: str, root: str = 'reduction') -> Iterator[None]:
        """Report how long ``stage`` took when benchmarking is on."""
        logger = logging.getLogger(f"{root}.benchmark")
        start = time.perf_counter()
        try:
            yield
        finally:
            if self.enable_benchmark:
                logger.info(f"[+] {stage} took {time.perf_counter() - start:.6f} seconds")
