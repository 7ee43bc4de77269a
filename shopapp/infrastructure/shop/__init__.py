"""
Infrastructure adapters for the shop bounded context.

Each adapter implements a domain port (ABC). Repositories run
SQLAlchemy Core statements on the connection of the current unit of work.
"""
