"""
API Models

Modelos Pydantic das respostas e requisições HTTP
"""

from typing import Optional, List, Dict
from pydantic import BaseModel, Field

from ranking.calculator import PlayerStats, StatBlock


# =============================================
# Ranking
# =============================================

class StatBlockModel(BaseModel):
    """Bloco de estatísticas"""
    wins: int = 0
    losses: int = 0
    sets_won: int = 0
    sets_lost: int = 0
    games_won: int = 0
    games_lost: int = 0
    tiebreaks_won: int = 0
    tiebreaks_lost: int = 0
    matches_played: int = 0
    matches_with_tiebreak: int = 0
    points: int = 0

    @classmethod
    def from_block(cls, block: StatBlock) -> "StatBlockModel":
        return cls(**vars(block))


class PlayerStatsResponse(BaseModel):
    """Estatísticas de um jogador no ranking"""
    id: str
    name: str
    category: Optional[str] = None
    avatar_url: Optional[str] = None

    legacy: StatBlockModel
    challenge: StatBlockModel
    superset: StatBlockModel

    total_wins: int
    total_losses: int
    total_sets_won: int
    total_sets_lost: int
    total_games_won: int
    total_games_lost: int
    total_points: int

    category_position: int = Field(..., description="Posição na classe")
    global_position: int = Field(..., description="Posição no Ranking Geral")

    @classmethod
    def from_stats(cls, player: PlayerStats) -> "PlayerStatsResponse":
        return cls(
            id=player.id,
            name=player.name,
            category=player.category,
            avatar_url=player.avatar_url,
            legacy=StatBlockModel.from_block(player.legacy),
            challenge=StatBlockModel.from_block(player.challenge),
            superset=StatBlockModel.from_block(player.superset),
            total_wins=player.total_wins,
            total_losses=player.total_losses,
            total_sets_won=player.total_sets_won,
            total_sets_lost=player.total_sets_lost,
            total_games_won=player.total_games_won,
            total_games_lost=player.total_games_lost,
            total_points=player.total_points,
            category_position=player.category_position,
            global_position=player.global_position,
        )


class RankingResponse(BaseModel):
    """Ranking Geral"""
    category: Optional[str] = None
    total: int
    players: List[PlayerStatsResponse]


class RankingByCategoryResponse(BaseModel):
    """Ranking por classe"""
    categories: Dict[str, List[PlayerStatsResponse]]


# =============================================
# Desafios
# =============================================

class EligibilityResponse(BaseModel):
    """Resultado da validação de desafio"""
    allowed: bool
    reason: Optional[str] = None


class MonthlyLimitResponse(BaseModel):
    """Cota mensal do jogador"""
    player_id: str
    month_ref: str
    can_challenge_others: bool
    can_be_challenged: bool
    challenges_made: int
    challenges_received: int


class ChallengeCreate(BaseModel):
    """Criação de desafio"""
    challenger_id: str
    challenged_id: str
    scheduled_date: Optional[str] = Field(None, description="YYYY-MM-DD")
    scheduled_time: Optional[str] = Field(None, description="HH:mm")
    court_id: Optional[str] = None


class ChallengeReason(BaseModel):
    """Motivo de recusa/cancelamento"""
    reason: Optional[str] = None
