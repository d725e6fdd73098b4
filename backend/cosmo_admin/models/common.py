from __future__ import annotations

import uuid


def new_id() -> str:
    """Primary keys are UUID strings, as issued by the hosted database."""
    return str(uuid.uuid4())
