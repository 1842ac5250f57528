"""Person registry use cases and persistence."""
