"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- Providers (rate APIs)
- HTTP client
- Persistence (storage)
- Formatting (output)
"""

__all__ = []
