"""Duplicate detection and text similarity."""
