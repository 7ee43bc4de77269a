"""HTTP adapter for the shop bounded context."""
