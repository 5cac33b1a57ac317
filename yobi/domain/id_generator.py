from __future__ import annotations

import secrets
import time
from typing import Optional

_PUSH_CHARS = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"


def generate_game_id(now_ms: Optional[int] = None) -> str:
    """Return a 20-character key that sorts by creation time.

    Matches the shape of Realtime Database push keys: eight characters
    encoding the millisecond timestamp followed by twelve random ones.
    """
    stamp = int(time.time() * 1000) if now_ms is None else now_ms
    prefix = []
    for _ in range(8):
        prefix.append(_PUSH_CHARS[stamp % 64])
        stamp //= 64
    suffix = "".join(secrets.choice(_PUSH_CHARS) for _ in range(12))
    return "".join(reversed(prefix)) + suffix
