"""Service layer — file-level graph operations returning ServiceResult.

Services may import from core, domain, infrastructure and config.
They must never import from commands or output.
"""
