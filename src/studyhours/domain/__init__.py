"""Domain layer — records, errors, timer contract, and entry parsing.

This layer depends only on stdlib and pydantic.
It must never import from services, infrastructure, commands, or config.
"""
