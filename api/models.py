"""Pydantic response models for the status API."""

from pydantic import BaseModel, Field

from game.state import GameState, RoundResult


class RoundResultPublic(BaseModel):
    """Outcome of one resolved round."""

    round_id: str
    impostor_won: bool
    impostor_name: str
    footballer: str
    voted_out_name: str | None = None


class StatusResponse(BaseModel):
    """Live room status for GET /status."""

    room: str
    phase: str
    players_connected: int = Field(..., ge=0)
    players_in_queue: int = Field(..., ge=0)
    rounds_played: int = Field(..., ge=0)


class MetricsResponse(StatusResponse):
    """Status plus uptime and the last resolved round, for GET /metrics."""

    uptime_seconds: float = Field(..., ge=0)
    last_round: RoundResultPublic | None = Field(
        default=None,
        description="Most recent resolved round; null until the first round ends",
    )


class RoundRecordPublic(BaseModel):
    """One round as kept by the history store."""

    round_id: str
    footballer: str
    impostor_name: str
    impostor_won: bool
    voted_out_name: str | None = None
    recorded_at: float


def round_result_to_public(result: RoundResult) -> RoundResultPublic:
    return RoundResultPublic(
        round_id=result.round_id,
        impostor_won=result.impostor_won,
        impostor_name=result.impostor_name,
        footballer=result.footballer,
        voted_out_name=result.voted_out_name,
    )


def status_from_snapshot(snapshot: dict, room_name: str) -> StatusResponse:
    return StatusResponse(
        room=room_name,
        phase=snapshot["phase"],
        players_connected=snapshot["player_count"],
        players_in_queue=snapshot["queue_count"],
        rounds_played=snapshot["rounds_played"],
    )


def metrics_from_snapshot(
    snapshot: dict, state: GameState, room_name: str, uptime_seconds: float
) -> MetricsResponse:
    """Build the metrics view. The live round's secret is never part of it."""
    last = state.round_history[-1] if state.round_history else None
    return MetricsResponse(
        **status_from_snapshot(snapshot, room_name).model_dump(),
        uptime_seconds=uptime_seconds,
        last_round=round_result_to_public(last) if last else None,
    )
