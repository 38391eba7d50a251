"""Calendar models, the in-memory calendar and the availability engine."""
