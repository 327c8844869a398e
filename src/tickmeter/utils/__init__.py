"""Utility functions and helpers for tickmeter.

This package provides:
- Formatting helpers for durations, percentages, speed and bars
- Iteration helpers that drive a progress while consuming work
"""
