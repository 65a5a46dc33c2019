"""Domain layer: duration, nullable values, and wire value kinds.

This layer depends only on stdlib and pydantic.
It must never import from decoding, services, commands, or config.
"""
