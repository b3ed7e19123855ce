"""Checkin GolangSP: event check-in form and credential generator."""

__version__ = "1.0.0"
