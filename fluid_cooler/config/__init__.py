"""Configuration models, loading and plant assembly."""
