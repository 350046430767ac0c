"""Shared HTTP client infrastructure."""
