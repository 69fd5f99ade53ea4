"""Infrastructure layer — database engine, ledgers, and the real timer.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It must never import from services, commands, output, or server.
"""
