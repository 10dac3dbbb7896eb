"""Spaced-repetition module: memory-state updates and their persistence."""
