import logging
import uuid
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

import game_context
from engine.character import (
    build_character,
    list_backgrounds,
    list_classes,
    list_personalities,
    list_races,
)
from engine.dice import Dice
from engine.validator import ContractError
from game_session import GameSession
from script.scene_loader import ContentCatalog

logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

catalog = ContentCatalog(game_context.DATA_DIR)
sessions: Dict[str, GameSession] = {}


class StepRequest(BaseModel):
    session_id: str
    action: str
    choice: int | None = None
    skill: str | None = None


class SessionRequest(BaseModel):
    session_id: str


class CharacterCreateRequest(BaseModel):
    session_id: str | None = None
    name: str | None = None
    className: str
    race: str
    background: str
    personality: str
    visuals: Dict[str, Any] | None = None


def new_session(player: Optional[Dict[str, Any]] = None) -> GameSession:
    return GameSession(
        catalog,
        player=player,
        dice=Dice.seeded(game_context.SEED),
        narration=game_context.NARRATION,
    )


def _run(fn: Callable[[], Any]) -> Any:
    """
    Engine errors -> HTTP: contract violations are 409, unknown content ids 404.
    """
    try:
        return fn()
    except ContractError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e.args[0]) if e.args else "Not found")


def _response(session_id: str, session: GameSession, events) -> Dict[str, Any]:
    return {"session_id": session_id, "events": events, "state": session.snapshot()}


@app.get("/options")
def get_options():
    """
    Everything the character creator can offer.
    """
    return {
        "classes": list_classes(catalog),
        "races": [catalog.race(r) for r in list_races(catalog)],
        "backgrounds": [catalog.background(b) for b in list_backgrounds(catalog)],
        "personalities": [catalog.personality(p) for p in list_personalities(catalog)],
    }


@app.post("/character/create")
def create_character(req: CharacterCreateRequest):
    """
    Build a character and begin a fresh session at the mine entrance.
    """
    player = _run(lambda: build_character(
        catalog,
        req.className,
        req.race,
        req.background,
        req.personality,
        visuals=req.visuals,
        name=req.name,
    ))
    session_id = req.session_id or uuid.uuid4().hex
    session = new_session(player)
    sessions[session_id] = session
    logger.info("Session %s created for %s", session_id, player["name"])
    return _response(session_id, session, session.start())


@app.post("/step")
def step(req: StepRequest):
    # "start" on an unknown session opens a novice run at the story start.
    if req.session_id not in sessions:
        if req.action != "start":
            raise HTTPException(status_code=404, detail=f"Unknown session: {req.session_id}")
        sessions[req.session_id] = new_session()

    session = sessions[req.session_id]
    payload: Dict[str, Any] = {
        "action": req.action,
        "choice": req.choice,
        "skill": req.skill,
    }
    payload = {k: v for k, v in payload.items() if v is not None}
    events = _run(lambda: session.step(payload))
    return _response(req.session_id, session, events)


@app.post("/restart")
def restart(req: SessionRequest):
    if req.session_id not in sessions:
        raise HTTPException(status_code=404, detail=f"Unknown session: {req.session_id}")
    session = sessions[req.session_id]
    return _response(req.session_id, session, session.restart())


@app.post("/state")
def state(req: SessionRequest):
    if req.session_id not in sessions:
        raise HTTPException(status_code=404, detail=f"Unknown session: {req.session_id}")
    session = sessions[req.session_id]
    return _response(req.session_id, session, [])
