"""Domain helpers for chirp body validation and profanity masking."""
from __future__ import annotations

MAX_CHIRP_LENGTH = 140
MASK = "****"
PROFANE_WORDS = frozenset({"kerfuffle", "sharbert", "fornax"})


class ChirpTooLongError(ValueError):
    """Raised when a chirp body exceeds MAX_CHIRP_LENGTH characters."""


def clean_body(body: str) -> str:
    """Mask profane words. Only whole space-separated words match, so "Fornax!" is kept."""
    words = body.split(" ")
    return " ".join(MASK if word.lower() in PROFANE_WORDS else word for word in words)


def validate_body(body: str | None) -> str:
    """Return the cleaned body, or raise ChirpTooLongError."""
    text = body or ""
    if len(text) > MAX_CHIRP_LENGTH:
        raise ChirpTooLongError("Chirp is too long")
    return clean_body(text)
