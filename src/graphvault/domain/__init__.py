"""Domain layer — entities, the graph aggregate, and errors.

This layer depends only on stdlib and pydantic.
It must never import from infrastructure, config, or the connection.
"""
