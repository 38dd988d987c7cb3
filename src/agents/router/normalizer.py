"""
Text normalizer - canonical form used for intent matching
"""


def normalize_text(text: str) -> str:
    """Trim and lower-case user input for pattern matching.

    The original-case text is what gets forwarded to the backend; this form is
    only used for classification.
    """
    return (text or "").strip().lower()
