"""Resolve the current user's email from the server-side users file."""

import json
from pathlib import Path
from typing import Optional

import config
from logger import logger


def current_user_email(users_file: Optional[Path] = None) -> Optional[str]:
    """Get the delivery address for newly created events.

    The users file holds either a list of user objects (the first with a
    non-blank "email" wins) or a single user object.

    Returns:
        Email address, or None if it cannot be determined
    """
    path = Path(users_file or config.USERS_FILE)
    if not path.exists():
        logger.warning(f"Users file not found: {path}")
        return None

    try:
        raw = path.read_text(encoding="utf-8")
        data = json.loads(raw) if raw.strip() else None
    except (OSError, ValueError) as e:
        logger.error(f"Error reading users from {path}: {e}")
        return None

    candidates = data if isinstance(data, list) else [data]
    for user in candidates:
        if isinstance(user, dict):
            email = user.get("email")
            if isinstance(email, str) and email.strip():
                return email.strip()

    return None
