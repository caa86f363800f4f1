"""
Core modules for Fuel Tracker.

This package contains the recompute engine, monthly summaries,
input validation and the command controller.
"""
