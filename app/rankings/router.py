"""
Ranking API Router

Ranking Geral, ranking por classe e adversários elegíveis
"""

from typing import Optional, List
from fastapi import APIRouter, Depends, HTTPException, Query

from ranking.eligibility import ChallengeLimiter, get_eligible_opponents
from ranking.service import RankingService
from ..dependencies import get_ranking_service, get_challenge_limiter
from ..models import PlayerStatsResponse, RankingResponse, RankingByCategoryResponse

router = APIRouter(prefix="/ranking", tags=["Ranking"])


@router.get("", response_model=RankingResponse)
async def get_ranking(
    category: Optional[str] = Query(None, description="Classe (4ª Classe, 5ª Classe, ...)"),
    refresh: bool = Query(False, description="Ignorar cache"),
    service: RankingService = Depends(get_ranking_service)
):
    """
    Ranking Geral

    Ordenado por classe e depois por pontos, vitórias e sets.
    Com filtro de classe o ranking é sempre recalculado.
    """
    players = await service.fetch_ranking(category=category, force_refresh=refresh)
    return RankingResponse(
        category=category,
        total=len(players),
        players=[PlayerStatsResponse.from_stats(p) for p in players]
    )


@router.get("/by-category", response_model=RankingByCategoryResponse)
async def get_ranking_by_category(
    refresh: bool = Query(False),
    service: RankingService = Depends(get_ranking_service)
):
    """Ranking agrupado por classe"""
    grouped = await service.fetch_ranking_by_category(force_refresh=refresh)
    return RankingByCategoryResponse(
        categories={
            category: [PlayerStatsResponse.from_stats(p) for p in players]
            for category, players in grouped.items()
        }
    )


@router.get("/{player_id}", response_model=PlayerStatsResponse)
async def get_player_stats(
    player_id: str,
    service: RankingService = Depends(get_ranking_service)
):
    """Estatísticas de um jogador"""
    player = await service.get_player(player_id)
    if player is None:
        raise HTTPException(status_code=404, detail="Jogador não encontrado no ranking")
    return PlayerStatsResponse.from_stats(player)


@router.get("/{player_id}/opponents", response_model=List[PlayerStatsResponse])
async def get_opponents(
    player_id: str,
    with_limits: bool = Query(False, description="Remover quem já foi desafiado este mês"),
    service: RankingService = Depends(get_ranking_service),
    limiter: ChallengeLimiter = Depends(get_challenge_limiter)
):
    """
    Adversários que o jogador pode desafiar

    - regra de posição (até 3 posições no Ranking Geral)
    - with_limits=true: também exige cota de desafio recebido livre
    """
    ranking = await service.fetch_ranking()
    if not any(p.id == player_id for p in ranking):
        raise HTTPException(status_code=404, detail="Jogador não encontrado no ranking")

    if with_limits:
        opponents = await limiter.get_available_opponents(player_id, ranking)
    else:
        opponents = get_eligible_opponents(player_id, ranking, limiter.position_window)

    return [PlayerStatsResponse.from_stats(p) for p in opponents]
