"""Reusable CLI options and validators."""
