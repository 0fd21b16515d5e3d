"""Output file helpers."""
