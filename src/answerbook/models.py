"""Result models for an answer book request.

Plain dataclasses for what flows between the browser pipeline and the
host surfaces: the extracted text, the raw capture, and the final reply.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class PresentationMode(str, Enum):
    """Output shape requested for an answer.

    Members accept either the slug (``english_upper``) or the label shown
    to Chinese-speaking users (``英文(大写)文本模式``).
    """

    IMAGE = "image"
    CHINESE = "chinese"
    CHINESE_SPACED = "chinese_spaced"
    ENGLISH_LOWER = "english_lower"
    ENGLISH_UPPER = "english_upper"
    BILINGUAL_LOWER = "bilingual_lower"
    BILINGUAL_LOWER_SPACED = "bilingual_lower_spaced"
    BILINGUAL_UPPER = "bilingual_upper"
    BILINGUAL_UPPER_SPACED = "bilingual_upper_spaced"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_image(self) -> bool:
        return self is PresentationMode.IMAGE

    @property
    def uppercase(self) -> bool:
        return self in (
            PresentationMode.ENGLISH_UPPER,
            PresentationMode.BILINGUAL_UPPER,
            PresentationMode.BILINGUAL_UPPER_SPACED,
        )

    @property
    def spaced(self) -> bool:
        return self in (
            PresentationMode.CHINESE_SPACED,
            PresentationMode.BILINGUAL_LOWER_SPACED,
            PresentationMode.BILINGUAL_UPPER_SPACED,
        )

    @classmethod
    def parse(cls, value: str) -> PresentationMode | None:
        """Return the mode matching *value* (slug or label), or ``None``."""
        value = value.strip()
        for mode in cls:
            if value in (mode.value, _LABELS[mode]):
                return mode
        return None


_LABELS: dict[PresentationMode, str] = {
    PresentationMode.IMAGE: "图片模式",
    PresentationMode.CHINESE: "中文文本模式",
    PresentationMode.CHINESE_SPACED: "中文文本模式(带空格)",
    PresentationMode.ENGLISH_LOWER: "英文(小写)文本模式",
    PresentationMode.ENGLISH_UPPER: "英文(大写)文本模式",
    PresentationMode.BILINGUAL_LOWER: "中英文(小写)文本模式",
    PresentationMode.BILINGUAL_LOWER_SPACED: "中英文(小写)文本模式(带空格)",
    PresentationMode.BILINGUAL_UPPER: "中英文(大写)文本模式",
    PresentationMode.BILINGUAL_UPPER_SPACED: "中英文(大写)文本模式(带空格)",
}


@dataclass
class TextResult:
    """Answer text split by script.

    Each field holds the last visible node seen for that script, not a
    concatenation of all of them.
    """

    chinese_text: str = ""
    english_text: str = ""


@dataclass
class CaptureResult:
    """Raw output of the page: a screenshot or extracted text, never both."""

    image: bytes | None = None
    mime_type: str | None = None
    text: TextResult = field(default_factory=TextResult)


@dataclass
class Reply:
    """What the host receives: either a plain string or a tagged image."""

    text: str | None = None
    image: bytes | None = None
    mime_type: str | None = None

    @property
    def is_image(self) -> bool:
        return self.image is not None
