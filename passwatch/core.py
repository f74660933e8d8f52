# -*- coding: utf-8 -*-
from __future__ import annotations

import re
import string
from functools import lru_cache
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional


# -------------------- Common patterns / weak lists --------------------
COMMON_PASSWORDS = frozenset({
    "password", "password123", "123456", "qwerty", "letmein",
    "welcome", "abc123", "admin", "user", "test123",
})

# anything of this length or shorter is weak
MAX_WEAK_LENGTH = 12

PUNCTUATION = frozenset(string.punctuation)


class ReasonCode(str, Enum):
    COMMON_LIST = "COMMON_LIST"
    SHORT_LENGTH = "SHORT_LENGTH"
    SINGLE_CHARACTER_CLASS = "SINGLE_CHARACTER_CLASS"


@dataclass(frozen=True)
class Verdict:
    is_weak: bool
    reasons: FrozenSet[ReasonCode] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        return {"is_weak": self.is_weak, "reasons": sorted(r.value for r in self.reasons)}


# -------------------- Helpers --------------------
# letters count by case (é is lowercase); whitespace belongs to no class
def _has_upper(s: str) -> bool: return any(ch.isupper() for ch in s)
def _has_lower(s: str) -> bool: return any(ch.islower() for ch in s)
def _has_digit(s: str) -> bool: return bool(re.search(r"[0-9]", s))
def _has_symbol(s: str) -> bool: return any(ch in PUNCTUATION for ch in s)

def character_classes(s: str) -> int:
    """Number of classes present among lowercase, uppercase, digit and special."""
    return sum((_has_lower(s), _has_upper(s), _has_digit(s), _has_symbol(s)))

def normalize_common_list(words: Iterable[str]) -> FrozenSet[str]:
    return frozenset(w.strip().lower() for w in words if w and w.strip())

@lru_cache(maxsize=32)
def _lowered(words: FrozenSet[str]) -> FrozenSet[str]:
    return normalize_common_list(words)


# -------------------- Domain gate --------------------
def is_in_scope(identity: Optional[str], corporate_domain_suffix: Optional[str]) -> bool:
    """
    Case-insensitive suffix match of the identity against the corporate domain.
    `someone@notculture.ai` is not in scope for `@culture.ai` because the
    comparison is anchored on the end of the whole string.
    """
    if not identity or not corporate_domain_suffix:
        return False
    return identity.lower().endswith(corporate_domain_suffix.lower())


# -------------------- Classifier --------------------
def classify(secret: Optional[str], common_passwords: Iterable[str] = COMMON_PASSWORDS) -> Verdict:
    """
    Weak if ANY rule fires. Every rule is evaluated so the verdict carries
    all reasons, not just the first one.
    """
    secret = secret or ""
    common_passwords = _lowered(frozenset(common_passwords))

    reasons = set()
    if secret.lower() in common_passwords:
        reasons.add(ReasonCode.COMMON_LIST)
    if len(secret) <= MAX_WEAK_LENGTH:
        reasons.add(ReasonCode.SHORT_LENGTH)
    if character_classes(secret) <= 1:
        reasons.add(ReasonCode.SINGLE_CHARACTER_CLASS)

    return Verdict(is_weak=bool(reasons), reasons=frozenset(reasons))
