"""
Core app - Shared abstractions used by every other app.

Provides:
- The error taxonomy rendered by the API (exceptions)
- The authorization gate applied before every mutation (authorization)
"""
