"""Domain layer — field records, type signatures, rule composition, errors.

This layer depends only on stdlib and pydantic.
It must never import from validation, services, commands, or config.
"""
