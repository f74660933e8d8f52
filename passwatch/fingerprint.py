from __future__ import annotations

import hashlib
import json
import re
from typing import Any


FINGERPRINT_RE = re.compile(r"^[a-f0-9]{64}$")


def canonical_json(obj: Any) -> bytes:
    """
    Deterministic JSON encoding for request bodies.
    """
    return json.dumps(obj, ensure_ascii=False, sort_keys=True, separators=(",", ":")).encode("utf-8")


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def fingerprint(secret: str) -> str:
    """
    Four-round one-way transform sent instead of the password:

      h1 = sha256(secret)
      h2 = first 32 hex chars of h1
      h3 = sha256(h2)
      h4 = sha256(h3)   -> returned

    The receiving side recomputes this schedule byte for byte, so the
    truncation in round two must stay as is.
    """
    h1 = sha256_hex(secret or "")
    h2 = h1[:32]
    h3 = sha256_hex(h2)
    return sha256_hex(h3)


def is_fingerprint(value: Any) -> bool:
    return isinstance(value, str) and bool(FINGERPRINT_RE.match(value))
