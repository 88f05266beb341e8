"""API routes for answerbook."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, Response
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from answerbook.book import AnswerBook

router = APIRouter()


class PromptResponse(BaseModel):
    text: str


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    session = getattr(request.app.state, "session", None)
    return {"status": "ok", "browser_running": bool(session and session.is_running)}


@router.get("/answer/prompt", response_model=PromptResponse)
def answer_prompt(request: Request) -> Response | PromptResponse:
    """Message to show before the answer, or 204 when it is suppressed."""
    book: AnswerBook = request.app.state.book
    text = book.prompt_text()
    if text is None:
        return Response(status_code=204)
    return PromptResponse(text=text)


@router.get("/answer")
async def answer(
    request: Request,
    mode: Optional[str] = Query(None, description="Presentation mode override (slug or label)."),
) -> Response:
    """Open the book once and return the answer as an image or plain text."""
    book: AnswerBook = request.app.state.book
    reply = await book.answer(mode)
    if reply is None:
        raise HTTPException(status_code=502, detail="Could not open the answer book.")
    if reply.is_image:
        return Response(content=reply.image, media_type=reply.mime_type)
    return PlainTextResponse(reply.text or "")
