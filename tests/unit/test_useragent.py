"""Unit tests for randomized user-agent synthesis."""

from __future__ import annotations

import random
import re

from answerbook.browser.useragent import random_browser_version, random_user_agent

_UA_RE = re.compile(
    r"^Mozilla/5\.0 \(Windows NT 10\.0; Win64; x64\) AppleWebKit/537\.36 \(KHTML, like Gecko\) "
    r"Chrome/(\d+)\.(\d+)\.0\.0 Safari/537\.36 Edg/(\d+)\.(\d+)\.0\.0$"
)


class _FixedBits(random.Random):
    def __init__(self, value: int) -> None:
        super().__init__()
        self._value = value

    def getrandbits(self, k: int) -> int:
        return self._value


class TestRandomBrowserVersion:
    def test_high_byte_is_major_low_byte_is_minor(self) -> None:
        assert random_browser_version(_FixedBits(0x7B05)) == "123.5.0.0"

    def test_bounds(self) -> None:
        assert random_browser_version(_FixedBits(0)) == "0.0.0.0"
        assert random_browser_version(_FixedBits(0xFFFF)) == "255.255.0.0"


class TestRandomUserAgent:
    def test_format(self) -> None:
        ua = random_user_agent(random.Random(7))
        match = _UA_RE.match(ua)
        assert match is not None
        assert all(0 <= int(part) <= 255 for part in match.groups())

    def test_deterministic_given_seed(self) -> None:
        assert random_user_agent(random.Random(42)) == random_user_agent(random.Random(42))

    def test_default_rng_produces_valid_agent(self) -> None:
        assert _UA_RE.match(random_user_agent())
