"""Core: configuration, domain, interfaces and services. No direct I/O here
except through the adapters wired in by `ServiceCall`."""
