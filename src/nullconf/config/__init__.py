"""Configuration layer: settings and logging."""
