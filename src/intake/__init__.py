"""Request intake flow: analysis, recommendations, persistence."""
