"""Answer text extraction and script classification.

The answer page renders the reply in several ``.content-en`` nodes, some
hidden.  Each visible node is sorted into a Chinese or an English bucket
by looking for CJK Unified Ideographs; a later node overwrites an earlier
one in the same bucket.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from answerbook.models import TextResult

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)

CJK_RE = re.compile(r"[\u4e00-\u9fff]")

# One round-trip per node: text plus rendered size.
_NODE_SAMPLE_JS = """
(el) => ({
    text: el.textContent || '',
    width: el.offsetWidth || 0,
    height: el.offsetHeight || 0,
})
"""


class Script(str, Enum):
    CHINESE = "chinese"
    ENGLISH = "english"


@dataclass(frozen=True)
class NodeSample:
    """Text and rendered size of one result content node."""

    text: str
    width: float = 0
    height: float = 0

    @property
    def visible(self) -> bool:
        return self.width > 0 and self.height > 0 and self.text.strip() != ""


def contains_cjk(text: str) -> bool:
    return CJK_RE.search(text) is not None


def classify(text: str) -> Script:
    """Any CJK ideograph makes the text Chinese, even when mixed with Latin."""
    return Script.CHINESE if contains_cjk(text) else Script.ENGLISH


def accumulate(samples: Iterable[NodeSample]) -> TextResult:
    """Fold node samples into a ``TextResult``, skipping invisible nodes."""
    result = TextResult()
    for sample in samples:
        if not sample.visible:
            continue
        if classify(sample.text) is Script.CHINESE:
            result.chinese_text = sample.text
        else:
            result.english_text = sample.text
    return result


async def sample_nodes(page: Page, selector: str) -> list[NodeSample]:
    """Read text and size of every node matching *selector*, in DOM order."""
    samples: list[NodeSample] = []
    for element in await page.query_selector_all(selector):
        data = await element.evaluate(_NODE_SAMPLE_JS)
        samples.append(
            NodeSample(
                text=data.get("text", ""),
                width=data.get("width", 0),
                height=data.get("height", 0),
            )
        )
    return samples


async def extract_text(page: Page, selector: str) -> TextResult:
    samples = await sample_nodes(page, selector)
    result = accumulate(samples)
    logger.debug(
        "Extracted %d node(s) from %s (chinese=%r, english=%r)",
        len(samples),
        selector,
        result.chinese_text,
        result.english_text,
    )
    return result
