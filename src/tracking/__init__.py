"""In-process check metrics."""
