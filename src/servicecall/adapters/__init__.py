"""Adapters: everything that performs I/O (HTTP, function invocation)."""
