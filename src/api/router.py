"""HTTP routes. Thin: parse the request, hand over to the MatchService, return its envelope."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from src.api.models import (
    ActionRequest,
    ActionResponse,
    CreateMatchRequest,
    Envelope,
    LegalMoves,
    MatchCreated,
    PairingRequest,
)
from src.core.exceptions import InvalidRequestError
from src.db.database import get_db
from src.db.sql_repository import SQLMatchRepository
from src.services.match_service import MatchService

router = APIRouter()


def get_match_service(
    request: Request, db: Annotated[Session, Depends(get_db)]
) -> MatchService:
    """One repository per request (session), but the locks are shared by the whole application."""
    return MatchService(SQLMatchRepository(db), request.app.state.match_locks)


Service = Annotated[MatchService, Depends(get_match_service)]


@router.post("/matches", response_model=Envelope[MatchCreated])
def create_match(request: CreateMatchRequest, service: Service) -> Envelope[MatchCreated]:
    return service.create_match(request)


@router.get("/matches/{match_id}/state", response_model=ActionResponse)
def get_match_state(match_id: str, service: Service) -> ActionResponse:
    return service.get_match_state(match_id)


@router.post("/matches/{match_id}/actions", response_model=ActionResponse)
def submit_action(match_id: str, request: ActionRequest, service: Service) -> ActionResponse:
    if request.match_id != match_id:
        raise InvalidRequestError(
            f"matchId in body ({request.match_id!r}) does not match the URL ({match_id!r})."
        )
    return service.submit_action(request)


@router.get("/matches/{match_id}/legal-moves", response_model=Envelope[LegalMoves])
def legal_moves(
    match_id: str,
    service: Service,
    player_id: Annotated[str, Query(alias="playerId")],
    square: str,
) -> Envelope[LegalMoves]:
    return service.legal_moves(match_id, player_id, square)


@router.delete("/matches/{match_id}", status_code=204)
def delete_match(match_id: str, service: Service) -> None:
    service.delete_match(match_id)


@router.post("/matchmaking/pairs", response_model=Envelope[list[tuple[str, str]]])
def pair_players(request: PairingRequest, service: Service) -> Envelope[list[tuple[str, str]]]:
    return service.pair_players(request)
