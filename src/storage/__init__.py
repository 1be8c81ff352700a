"""Submission repositories."""
