"""Process privilege checks."""

import os


def is_superuser() -> bool:
    """Check if the process runs with an effective uid of 0."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is None:
        return False
    return geteuid() == 0
