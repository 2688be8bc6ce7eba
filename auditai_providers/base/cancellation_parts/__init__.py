"""Cancellation token, error and state implementations."""
