"""Process-wide verdict cache."""
