"""Adapters connecting the core to files, HTTP and logging."""
