"""Service layer — DTO operations returning ServiceResult.

Services may import from the domain, validation, and config layers.
They must never import from commands or output.
"""
