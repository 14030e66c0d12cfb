"""Command line interface for cmdrest."""
