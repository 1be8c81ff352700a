"""Embedding providers for the semantic similarity signal."""
