"""
High-level use cases for the Chirpy API.

Each service module orchestrates the repository to implement business rules
(register, log in, post a chirp, apply a payment webhook, etc.).

Routers (FastAPI endpoints) call these services instead of manipulating the
JSON database directly.
"""
