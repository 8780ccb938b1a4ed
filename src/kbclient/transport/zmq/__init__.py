"""ZeroMQ transport implementation."""
