"""Domain layer — package/node types, identifiers and the error vocabulary.

This layer depends only on stdlib and pydantic.
It must never import from core, services, infrastructure, commands, or config.
"""
