"""FastAPI app: read-only status of the running room."""

import logging
import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from api.models import (
    MetricsResponse,
    RoundRecordPublic,
    StatusResponse,
    metrics_from_snapshot,
    status_from_snapshot,
)
from room.sequencer import GameSequencer

logger = logging.getLogger(__name__)

app = FastAPI(title="Impostor Room API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.sequencer = None
app.state.started_at = time.time()


def bind_sequencer(sequencer: GameSequencer | None) -> None:
    """Attach the room's sequencer (None detaches it). Endpoints return 503 while detached."""
    app.state.sequencer = sequencer
    app.state.started_at = time.time()
    logger.info("Status API %s", "bound to sequencer" if sequencer else "detached")


def _sequencer(request: Request) -> GameSequencer:
    sequencer = request.app.state.sequencer
    if sequencer is None:
        raise HTTPException(503, "Room is not running")
    return sequencer


@app.get("/health", tags=["System"], summary="Health check")
def health():
    return {"status": "ok"}


@app.get("/status", response_model=StatusResponse, tags=["Room"], summary="Room status")
def get_status(request: Request):
    """Current phase and player counts."""
    sequencer = _sequencer(request)
    return status_from_snapshot(sequencer.snapshot(), sequencer.settings.ROOM_NAME)


@app.get("/metrics", response_model=MetricsResponse, tags=["Room"], summary="Room metrics")
def get_metrics(request: Request):
    """Status plus uptime and the last resolved round."""
    sequencer = _sequencer(request)
    uptime = max(0.0, time.time() - request.app.state.started_at)
    return metrics_from_snapshot(sequencer.snapshot(), sequencer.state, sequencer.settings.ROOM_NAME, uptime)


@app.get("/rounds", response_model=list[RoundRecordPublic], tags=["Room"], summary="Round history")
def list_rounds(request: Request):
    """Rounds recorded by the history store, oldest first."""
    return _sequencer(request).history.rounds()
