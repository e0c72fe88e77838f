"""
Utility functions for the Sideline Rotation engine.

This module holds the wall-clock helper every service reads time through.
"""
import time


def now_ts() -> float:
    """
    Get current timestamp in epoch seconds.

    Returns:
        Current time as floating point epoch seconds
    """
    return time.time()
