import uuid


def random_id(prefix: str = "") -> str:
    """Generate a fresh opaque id, e.g. ``sess_5f0c...``."""
    return f"{prefix}{uuid.uuid4()}"
