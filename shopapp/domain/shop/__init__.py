"""
Shop bounded context: domain layer.

This module contains all domain logic for the shop context:
- Catalog products and their value rules
- Orders, order lines and the order state machine
- Watchlists
- Principals and role tags
"""
