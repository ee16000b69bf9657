"""Core layer — the graph engine and its builder, deserializer and pruner.

Core may import from domain and infrastructure.
It must never import from services, commands, output, or config.
"""
