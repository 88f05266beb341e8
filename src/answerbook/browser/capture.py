"""Capture Formatter: turn the revealed answer into the requested shape.

Image mode screenshots only the answer box (JPEG at the configured quality
when compression is on, PNG otherwise).  Text modes skip the screenshot
and format the extracted ``TextResult``.
"""

from __future__ import annotations

import logging
import re
from io import BytesIO
from typing import TYPE_CHECKING, Any

from PIL import Image

from answerbook.browser.extraction import extract_text
from answerbook.exceptions import ElementNotFoundError
from answerbook.models import CaptureResult, PresentationMode, TextResult

if TYPE_CHECKING:
    from playwright.async_api import Page

    from answerbook.settings.config import Settings

logger = logging.getLogger(__name__)

INVALID_MODE_TEXT = "无效的答案模式"

_CJK_CHAR_RE = re.compile(r"([\u4e00-\u9fff])")

_HIDE_JS = """
(selectors) => {
    selectors.forEach((selector) => {
        document.querySelectorAll(selector).forEach((el) => {
            el.style.display = 'none';
        });
    });
}
"""


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def add_cjk_spacing(text: str) -> str:
    """Insert one space after every CJK ideograph, trailing one included."""
    return _CJK_CHAR_RE.sub(r"\1 ", text)


def resolve_mode(value: str | PresentationMode | None) -> PresentationMode | None:
    if isinstance(value, PresentationMode):
        return value
    if value is None:
        return None
    return PresentationMode.parse(value)


def render_text(result: TextResult, mode: PresentationMode | str) -> str:
    """Format *result* for a text mode.

    Returns ``INVALID_MODE_TEXT`` for unknown modes and for image mode,
    which has no text rendering.
    """
    resolved = resolve_mode(mode)
    if resolved is None or resolved.is_image:
        return INVALID_MODE_TEXT

    chinese = add_cjk_spacing(result.chinese_text) if resolved.spaced else result.chinese_text
    english = result.english_text.upper() if resolved.uppercase else result.english_text

    if resolved in (PresentationMode.CHINESE, PresentationMode.CHINESE_SPACED):
        return chinese
    if resolved in (PresentationMode.ENGLISH_LOWER, PresentationMode.ENGLISH_UPPER):
        return english
    return f"{english}\n{chinese}"


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------


def screenshot_options(*, compress: bool, quality: int) -> dict[str, Any]:
    """``page.screenshot`` format arguments; PNG never takes a quality."""
    if compress:
        return {"type": "jpeg", "quality": quality}
    return {"type": "png"}


def downscale(image_bytes: bytes, max_width: int, max_height: int, *, quality: int = 80) -> bytes:
    """Shrink an image to fit within the given bounds, keeping its format.

    A bound of ``0`` leaves that dimension unconstrained; images already
    within bounds are returned unchanged.
    """
    if not max_width and not max_height:
        return image_bytes
    img = Image.open(BytesIO(image_bytes))
    width = max_width or img.width
    height = max_height or img.height
    if img.width <= width and img.height <= height:
        return image_bytes
    fmt = img.format or "PNG"
    img.thumbnail((width, height), Image.LANCZOS)
    buf = BytesIO()
    if fmt == "JPEG":
        img.save(buf, format="JPEG", quality=quality)
    else:
        img.save(buf, format=fmt, optimize=True)
    return buf.getvalue()


async def hide_overlays(page: Page, selectors: list[str]) -> None:
    if selectors:
        await page.evaluate(_HIDE_JS, selectors)


async def capture_image(page: Page, settings: Settings) -> tuple[bytes, str]:
    """Screenshot the answer box.

    Returns:
        ``(image_bytes, mime_type)``.

    Raises:
        ElementNotFoundError: If the answer container has no layout box.
    """
    answer = settings.answer
    await hide_overlays(page, settings.page.hide_selectors)

    selector = settings.page.container_selector
    element = await page.query_selector(selector)
    box = await element.bounding_box() if element is not None else None
    if not box:
        raise ElementNotFoundError(selector, element="答案区域")

    options = screenshot_options(compress=answer.image_compression, quality=answer.picture_quality)
    image = await page.screenshot(clip=box, **options)
    image = downscale(image, answer.max_width, answer.max_height, quality=answer.picture_quality)
    mime_type = f"image/{options['type']}"
    logger.debug("Captured %s (%d bytes)", mime_type, len(image))
    return image, mime_type


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def format_capture(page: Page, mode: PresentationMode, settings: Settings) -> CaptureResult:
    """Produce the raw capture for *mode*: screenshot or extracted text."""
    if mode.is_image:
        image, mime_type = await capture_image(page, settings)
        return CaptureResult(image=image, mime_type=mime_type)
    text = await extract_text(page, settings.page.result_selector)
    return CaptureResult(text=text)
