"""
Core utilities shared across the Chirpy API.

This package hosts configuration, password hashing, JWT helpers and the
fileserver hit counter. Services depend on these primitives instead of
reading the environment or importing crypto libraries directly.
"""
