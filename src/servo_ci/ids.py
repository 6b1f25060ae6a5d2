from __future__ import annotations

import uuid


def generate_identifier() -> str:
    """Random workload id, used in the runner label and the job's display name."""
    return str(uuid.uuid4())
