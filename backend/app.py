from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Allow running `python backend/app.py` from repo root.
_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from fastapi import FastAPI, HTTPException
from fastapi.responses import Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from pour_solver.board import replay
from pour_solver.puzzle import Puzzle, PuzzleError
from pour_solver.solver import SOLVER_CHOICES, solve_puzzle
from backend.render import render_board_png

logger = logging.getLogger(__name__)

MAX_TIMEOUT_MS = 1_000_000


def _parse_puzzle(text: str, *, capacity: Optional[int]) -> Puzzle:
    if text.lstrip().startswith(("{", "[")):
        return Puzzle.from_json(text, capacity=capacity)
    # Single-line input is a plain board string, where "#" is an ordinary label.
    if "\n" not in text.strip():
        return Puzzle.from_text(text, capacity=capacity)
    return Puzzle.from_board_text(text, capacity=capacity, source_name="<request>")


def _puzzle_payload(puzzle: Puzzle) -> Dict[str, Any]:
    return {
        "text": puzzle.to_text(),
        "capacity": puzzle.capacity,
        "rows": puzzle.rows,
        "labels": puzzle.labels[1:],
        "counts": {
            "containers": len(puzzle),
            "colors": len(puzzle.labels) - 1,
        },
        "meta": puzzle.meta,
    }


class ParseRequest(BaseModel):
    text: str
    capacity: Optional[int] = Field(default=None, ge=1)


class SolveRequest(ParseRequest):
    solver: str = Field(default="backtrack")
    timeout_ms: Optional[int] = Field(default=30_000, ge=1, le=MAX_TIMEOUT_MS)
    max_steps: Optional[int] = Field(default=None, ge=1)


class ThumbnailRequest(ParseRequest):
    moves: List[List[int]] = Field(default_factory=list)
    width: int = Field(default=240, ge=16, le=2048)
    height: int = Field(default=180, ge=16, le=2048)


app = FastAPI(title="Pour Solver API", version="0.1.0")

cors_raw = os.environ.get("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
cors_list = [c.strip() for c in cors_raw.split(",") if c.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_list or ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/solvers")
def list_solvers() -> Dict[str, Any]:
    return {"solvers": list(SOLVER_CHOICES)}


@app.post("/parse")
def parse_puzzle(req: ParseRequest) -> Dict[str, Any]:
    try:
        puzzle = _parse_puzzle(req.text, capacity=req.capacity)
    except PuzzleError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return _puzzle_payload(puzzle)


@app.post("/validate")
def validate(req: ParseRequest) -> Dict[str, Any]:
    try:
        puzzle = _parse_puzzle(req.text, capacity=req.capacity)
    except PuzzleError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    try:
        puzzle.validate()
    except PuzzleError as e:
        return {"valid": False, "reason": str(e)}
    return {"valid": True, "reason": None}


@app.post("/solve")
def solve(req: SolveRequest) -> Dict[str, Any]:
    try:
        puzzle = _parse_puzzle(req.text, capacity=req.capacity)
        res = solve_puzzle(puzzle, solver=req.solver, timeout_ms=req.timeout_ms, max_steps=req.max_steps)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    logger.info("solve %s: status=%s moves=%d", puzzle.to_text(), res.status.value, len(res.moves))
    return {
        "status": res.status.value,
        "moves": [[a, b] for a, b in res.moves],
        "stats": res.stats,
        "puzzle": _puzzle_payload(puzzle),
    }


@app.post("/thumbnail")
def thumbnail(req: ThumbnailRequest):
    try:
        puzzle = _parse_puzzle(req.text, capacity=req.capacity)
        board = puzzle.board()
        replay(board, [(a, b) for a, b in req.moves])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    png = render_board_png(puzzle, board.cells(), size=(req.width, req.height))
    return Response(png, media_type="image/png")
