"""
habitlog - Personal Habit & Journal Tracker

A local, single-user tool for logging daily habits, writing a short
journal, and scoring mood. Everything lives in one SQLite file.

Streaks are counted in your own calendar days, not UTC.
"""

__version__ = "0.1.0"
