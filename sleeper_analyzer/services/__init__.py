"""Sleeper API client and aggregation services."""
