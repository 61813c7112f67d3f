"""Chirpy: a small micro-post API backed by a single JSON file."""

__version__ = "0.1.0"
