"""
Esquemas dos registros lidos do Supabase

Modelos Pydantic para perfis, partidas e desafios. As linhas chegam como
dicionários do cliente do Supabase e são validadas aqui antes de entrar
no cálculo do ranking.
"""

from pydantic import BaseModel, Field, ValidationError, field_validator
from typing import Optional, List, Dict, Any, Iterable, Type, TypeVar
from datetime import datetime
from enum import Enum
import re
from loguru import logger


# ==================== Enums ====================

class MatchType(str, Enum):
    """Tipos de partida que entram no ranking"""
    CHALLENGE = "Desafio"
    RANKING_CHALLENGE = "Desafio Ranking"
    SUPERSET = "SuperSet"

    @classmethod
    def ranked_values(cls) -> List[str]:
        return [m.value for m in cls]


class MatchStatus(str, Enum):
    """Status da partida"""
    PENDING = "pending"
    FINISHED = "finished"


class ChallengeStatus(str, Enum):
    """Status do desafio"""
    PROPOSED = "proposed"
    ACCEPTED = "accepted"
    SCHEDULED = "scheduled"
    FINISHED = "finished"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    EXPIRED = "expired"

    @classmethod
    def void_values(cls) -> List[str]:
        """Status que não consomem a cota mensal"""
        return [cls.CANCELLED.value, cls.EXPIRED.value, cls.DECLINED.value]

    @classmethod
    def open_values(cls) -> List[str]:
        return [cls.PROPOSED.value, cls.ACCEPTED.value, cls.SCHEDULED.value]

    @classmethod
    def closed_values(cls) -> List[str]:
        return [cls.FINISHED.value, cls.CANCELLED.value, cls.DECLINED.value, cls.EXPIRED.value]


class ChallengeRole(str, Enum):
    """Papel do jogador no desafio"""
    CHALLENGER = "challenger"
    CHALLENGED = "challenged"

    @property
    def column(self) -> str:
        return f"{self.value}_id"


# Papéis de perfil que aparecem no ranking
RANKED_ROLES = ["socio", "admin"]

MONTH_REF_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


# ==================== Registros ====================

class ProfileRecord(BaseModel):
    """Perfil de jogador com estatísticas legadas"""

    id: str = Field(..., min_length=1, description="ID do perfil")
    name: str = Field(default="", description="Nome")
    category: Optional[str] = Field(None, description="Classe (4ª Classe, ...)")
    avatar_url: Optional[str] = Field(None, description="Avatar")

    # Estatísticas do sistema antigo (campeonatos)
    legacy_wins: int = Field(default=0)
    legacy_losses: int = Field(default=0)
    legacy_sets_won: int = Field(default=0)
    legacy_sets_lost: int = Field(default=0)
    legacy_games_won: int = Field(default=0)
    legacy_games_lost: int = Field(default=0)
    legacy_tiebreaks_won: int = Field(default=0)
    legacy_tiebreaks_lost: int = Field(default=0)
    legacy_matches_played: int = Field(default=0)
    legacy_matches_with_tiebreak: int = Field(default=0)
    legacy_points: int = Field(default=0)

    @field_validator(
        "legacy_wins", "legacy_losses", "legacy_sets_won", "legacy_sets_lost",
        "legacy_games_won", "legacy_games_lost", "legacy_tiebreaks_won",
        "legacy_tiebreaks_lost", "legacy_matches_played",
        "legacy_matches_with_tiebreak", "legacy_points",
        mode="before"
    )
    @classmethod
    def null_counter_as_zero(cls, v):
        return 0 if v is None else v

    @field_validator("name", mode="before")
    @classmethod
    def null_name_as_empty(cls, v):
        return v or ""

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_as_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class MatchRecord(BaseModel):
    """Partida finalizada (Desafio ou SuperSet)"""

    id: Optional[str] = Field(None, description="ID da partida")
    player_a_id: str = Field(..., description="Jogador A")
    player_b_id: str = Field(..., description="Jogador B")
    score_a: List[int] = Field(default_factory=list, description="Games do jogador A por set")
    score_b: List[int] = Field(default_factory=list, description="Games do jogador B por set")
    winner_id: Optional[str] = Field(None, description="Vencedor declarado")
    type: str = Field(..., description="Desafio | Desafio Ranking | SuperSet")
    status: str = Field(default=MatchStatus.FINISHED.value)

    @field_validator("score_a", "score_b", mode="before")
    @classmethod
    def null_score_as_empty(cls, v):
        # Set sem placar gravado conta como 0 games
        if v is None:
            return []
        if isinstance(v, list):
            return [0 if games is None else games for games in v]
        return v

    @property
    def is_superset(self) -> bool:
        return self.type == MatchType.SUPERSET.value

    @property
    def is_ranked(self) -> bool:
        return self.type in MatchType.ranked_values()

    @property
    def set_count(self) -> int:
        return max(len(self.score_a), len(self.score_b))


class ChallengeRecord(BaseModel):
    """Desafio entre dois jogadores"""

    id: Optional[str] = None
    challenger_id: str
    challenged_id: str
    month_ref: str = Field(..., description="YYYY-MM")
    status: ChallengeStatus = ChallengeStatus.PROPOSED
    created_at: Optional[datetime] = None

    # Agendamento
    scheduled_date: Optional[str] = None   # YYYY-MM-DD
    scheduled_time: Optional[str] = None   # HH:mm
    court_id: Optional[str] = None

    reservation_id: Optional[str] = None
    match_id: Optional[str] = None
    cancel_reason: Optional[str] = None
    notification_seen: Optional[bool] = None

    @field_validator("month_ref")
    @classmethod
    def validate_month_ref(cls, v: str) -> str:
        if not MONTH_REF_PATTERN.match(v):
            raise ValueError(f"month_ref inválido: {v} (esperado YYYY-MM)")
        return v

    @property
    def is_open(self) -> bool:
        return self.status.value in ChallengeStatus.open_values()


# ==================== Conversão ====================

T = TypeVar("T", bound=BaseModel)


def parse_rows(model: Type[T], rows: Iterable[Dict[str, Any]]) -> List[T]:
    """Valida linhas do Supabase; linhas inválidas são ignoradas com aviso"""
    records: List[T] = []
    for row in rows:
        try:
            records.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"{model.__name__} inválido ignorado ({row.get('id', '?')}): {e.error_count()} erro(s)")
    return records
