"""Scheduling and income tracking for freelance trainers."""

__version__ = "0.3.0"
