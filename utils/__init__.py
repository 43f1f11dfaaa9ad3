"""Utilities for long-running corpus jobs."""
