"""Core infrastructure: configuration, security, errors, realtime."""
