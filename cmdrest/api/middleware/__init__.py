"""Middleware for the cmdrest API."""
