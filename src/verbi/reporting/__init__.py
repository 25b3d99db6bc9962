"""Validation and translation run reports."""
