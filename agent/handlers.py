"""Classification of text shown on the reCAPTCHA challenge frame."""

# English only; a localized widget will not match these.
RATE_LIMIT_PHRASES = (
    "try again later",
)


def is_rate_limited(text: str, phrases: tuple[str, ...] = RATE_LIMIT_PHRASES) -> bool:
    """Case-insensitive substring match against known cooldown phrases."""
    text_lower = (text or "").lower()
    return any(phrase.lower() in text_lower for phrase in phrases)
