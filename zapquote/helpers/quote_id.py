"""Quote identifiers."""

import uuid


def create_quote_id(option_id: str) -> str:
    """Return a fresh, globally unique quote id scoped to the zap option."""
    return f"{option_id}-{uuid.uuid4().hex}"
