from __future__ import annotations

import logging
from uuid import UUID

from fastapi import FastAPI, HTTPException, Query

from agari.config import settings
from agari.hand_scoring import calculate_score
from agari.logging import setup_logging
from agari.quiz import generate_question
from agari.repository import InMemoryHistoryRepository
from agari.schemas import (
    HistoryEntryResponse,
    HistoryListResponse,
    QuizQuestion,
    ScoreError,
    ScoreRequest,
    ScoreResponse,
)
from agari.validators import validate_score_request

setup_logging(settings)
logger = logging.getLogger(__name__)

app = FastAPI(title="Agari Hand Score API", version="0.1.0")
history = InMemoryHistoryRepository(limit=settings.history_limit)


@app.get("/")
def root() -> dict[str, str]:
    return {
        "message": "Agari Hand Score API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/v1/score", response_model=ScoreResponse)
def score(req: ScoreRequest) -> ScoreResponse:
    validate_score_request(req)
    result = calculate_score(req.hand, req.context, req.rules)
    if isinstance(result, ScoreError):
        raise HTTPException(status_code=422, detail=result.model_dump(mode="json"))
    entry = history.append(
        {
            "hand": req.hand.model_dump(mode="json"),
            "context": req.context.model_dump(mode="json"),
            "rules": req.rules.model_dump(mode="json"),
            "result": result.model_dump(mode="json"),
        }
    )
    return ScoreResponse(score_id=entry.id, status="ok", result=result, warnings=[])


@app.get("/api/v1/history", response_model=HistoryListResponse)
def list_history() -> HistoryListResponse:
    entries = [HistoryEntryResponse(id=e.id, created_at=e.created_at, data=e.data) for e in history.list()]
    return HistoryListResponse(limit=history.limit, entries=entries)


@app.get("/api/v1/history/{entry_id}", response_model=HistoryEntryResponse)
def get_history(entry_id: UUID) -> HistoryEntryResponse:
    entry = history.get(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="record not found or evicted")
    return HistoryEntryResponse(id=entry.id, created_at=entry.created_at, data=entry.data)


@app.get("/api/v1/quiz", response_model=QuizQuestion)
def quiz(answers: list[bool] = Query(default=[])) -> QuizQuestion:
    question = generate_question(answers)
    if question is None:
        logger.error("quiz generation gave up without a conforming hand")
        raise HTTPException(status_code=503, detail="could not generate a question")
    return question
