"""ID generation helpers."""

import uuid


def generate_job_id() -> str:
    """Short random id used to correlate log lines of one render job."""
    return f"job_{uuid.uuid4().hex[:12]}"
