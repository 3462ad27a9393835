"""Shared helpers for the worklog application."""
