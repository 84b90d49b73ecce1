"""Shared helpers for dates, money, durations and logging."""
