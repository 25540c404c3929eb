"""Per-install user identity.

The id is resolved once at startup and sent as both a body field and a
header. Resolution never fails: if nothing usable is found the sentinel
``UNKNOWN_USER_ID`` is returned.
"""

from __future__ import annotations

import uuid
from pathlib import Path

import structlog

log = structlog.get_logger()

UNKNOWN_USER_ID = "unknown"


def resolve_user_id(configured: str = "", id_file: str | Path | None = None) -> str:
    """Return the configured id, else the persisted install id, else the sentinel.

    The install id file is created with a fresh UUID on first use.
    """
    if configured:
        return configured
    if not id_file:
        return UNKNOWN_USER_ID

    path = Path(id_file)
    try:
        if path.exists():
            user_id = path.read_text().strip()
            if user_id:
                return user_id
        user_id = str(uuid.uuid4())
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(user_id + "\n")
        log.info("install_id_created", path=str(path), user=user_id[:8])
        return user_id
    except (OSError, UnicodeDecodeError):
        log.warning("install_id_unavailable", path=str(path), exc_info=True)
        return UNKNOWN_USER_ID
