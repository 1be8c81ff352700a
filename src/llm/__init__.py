"""Text analysis provider clients."""
