"""
Challenge API Router

Validação, cota mensal e fluxo de desafios
"""

from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query

from ranking.eligibility import ChallengeLimiter
from ranking.models import ChallengeRecord
from ranking.service import RankingService
from ..dependencies import get_ranking_service, get_challenge_limiter, get_challenge_service
from ..models import (
    EligibilityResponse,
    MonthlyLimitResponse,
    ChallengeCreate,
    ChallengeReason
)
from .service import ChallengeService, ChallengeResult

router = APIRouter(prefix="/challenges", tags=["Challenges"])


def _unwrap(result: ChallengeResult) -> ChallengeRecord:
    """ChallengeResult → desafio ou HTTPException"""
    if result.success:
        return result.challenge
    status_code = 404 if result.not_found else 400
    raise HTTPException(status_code=status_code, detail=result.error)


# =============================================
# Regras
# =============================================

@router.get("/eligibility", response_model=EligibilityResponse)
async def check_eligibility(
    challenger_id: str = Query(...),
    target_id: str = Query(...),
    service: RankingService = Depends(get_ranking_service),
    limiter: ChallengeLimiter = Depends(get_challenge_limiter)
):
    """Posição + cota mensal dos dois jogadores"""
    ranking = await service.fetch_ranking()
    players = {p.id: p for p in ranking}
    challenger = players.get(challenger_id)
    target = players.get(target_id)
    if challenger is None or target is None:
        raise HTTPException(status_code=404, detail="Jogador não encontrado no ranking")

    check = await limiter.can_challenge_with_limits(challenger, target)
    return EligibilityResponse(allowed=check.allowed, reason=check.reason)


@router.get("/limits/{player_id}", response_model=MonthlyLimitResponse)
async def get_monthly_limits(
    player_id: str,
    limiter: ChallengeLimiter = Depends(get_challenge_limiter)
):
    """Cota do mês atual"""
    limits = await limiter.check_monthly_challenge_limit(player_id)
    return MonthlyLimitResponse(
        player_id=player_id,
        month_ref=limiter.month_ref(),
        **limits.to_dict()
    )


# =============================================
# Fluxo
# =============================================

@router.get("", response_model=List[ChallengeRecord])
async def list_challenges(
    player_id: str = Query(...),
    tab: Optional[str] = Query(None, pattern="^(active|history)$"),
    service: ChallengeService = Depends(get_challenge_service)
):
    """Desafios enviados e recebidos"""
    return await service.list_challenges(player_id, tab)


@router.post("", response_model=ChallengeRecord, status_code=201)
async def create_challenge(
    body: ChallengeCreate,
    service: ChallengeService = Depends(get_challenge_service)
):
    """
    Criar desafio

    - até 3 posições de distância no Ranking Geral
    - 1 desafio enviado e 1 recebido por mês
    """
    result = await service.create_challenge(
        body.challenger_id,
        body.challenged_id,
        body.scheduled_date,
        body.scheduled_time,
        body.court_id
    )
    return _unwrap(result)


@router.post("/{challenge_id}/accept", response_model=ChallengeRecord)
async def accept_challenge(
    challenge_id: str,
    service: ChallengeService = Depends(get_challenge_service)
):
    """Aceitar desafio"""
    return _unwrap(await service.accept_challenge(challenge_id))


@router.post("/{challenge_id}/decline", response_model=ChallengeRecord)
async def decline_challenge(
    challenge_id: str,
    body: Optional[ChallengeReason] = None,
    service: ChallengeService = Depends(get_challenge_service)
):
    """Recusar desafio"""
    reason = body.reason if body else None
    return _unwrap(await service.decline_challenge(challenge_id, reason))


@router.post("/{challenge_id}/cancel", response_model=ChallengeRecord)
async def cancel_challenge(
    challenge_id: str,
    body: Optional[ChallengeReason] = None,
    service: ChallengeService = Depends(get_challenge_service)
):
    """Cancelar desafio"""
    reason = body.reason if body else None
    return _unwrap(await service.cancel_challenge(challenge_id, reason))
