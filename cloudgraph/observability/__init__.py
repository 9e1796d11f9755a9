"""Logging and metrics for CloudGraph."""
