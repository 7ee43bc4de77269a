"""
Application layer for the shop bounded context.

Use cases coordinate domain entities and ports through a unit of work.
No framework or infrastructure imports allowed.
"""
