"""Core abstractions: enums, exceptions, sizable values, registry, diagnostics."""
