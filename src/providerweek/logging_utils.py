"""Logging helpers shared by the ingestion runner.

Handler setup lives in :func:`providerweek.ingestion_utils.setup_logging`;
this module only holds the message conventions and the step timers.
"""
from __future__ import annotations

import logging
import time
from typing import Dict


def log_system_event(logger: logging.Logger, message: str):
    logger.info("[SYSTEM] %s", message)


def log_warning(logger: logging.Logger, message: str):
    logger.warning("[WARNING] %s", message)


def log_error(logger: logging.Logger, message: str):
    logger.error("[ERROR] %s", message)


def start_phase_timer(phase_name: str) -> float:
    """Start a timer for a named step and return the perf counter."""
    return time.perf_counter()


def end_phase_timer(phase_name: str, start_time: float, timing_dict: Dict[str, float], logger: logging.Logger) -> float:
    """End timer, record to ``timing_dict`` and log the elapsed seconds."""
    elapsed = time.perf_counter() - float(start_time)
    timing_dict[phase_name] = timing_dict.get(phase_name, 0.0) + elapsed
    logger.info("%s completed in %.2f seconds", phase_name, elapsed)
    return elapsed
