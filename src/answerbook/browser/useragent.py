"""Randomized Chromium/Edge user-agent strings.

Pure functions of the supplied ``random.Random``: pass a seeded instance
in tests and ``random.SystemRandom()`` at the call site.
"""

from __future__ import annotations

import random

_BASE = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko)"


def random_browser_version(rng: random.Random) -> str:
    """Return ``major.minor.0.0`` built from 16 random bits (high byte major)."""
    number = rng.getrandbits(16)
    major = number >> 8
    minor = number & 0xFF
    return f"{major}.{minor}.0.0"


def random_user_agent(rng: random.Random | None = None) -> str:
    rng = rng or random.SystemRandom()
    chrome = f"Chrome/{random_browser_version(rng)}"
    edge = f"Edg/{random_browser_version(rng)}"
    return f"{_BASE} {chrome} Safari/537.36 {edge}"
