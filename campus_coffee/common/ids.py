"""Run identifier helpers."""

from __future__ import annotations

import uuid

from campus_coffee.common.time_utils import utc_now


def generate_run_id() -> str:
    # Timestamp prefix keeps log files sortable; the suffix separates runs started in the same second.
    return f"run-{utc_now():%Y%m%dT%H%M%SZ}-{uuid.uuid4().hex[:8]}"
