"""
Ranking do STC Play

Estatísticas (legado + desafios + SuperSets), Ranking Geral por classe
e regras de desafio
"""
from .calculator import (
    RankingCalculator,
    PlayerStats,
    StatBlock,
    aggregate_stats,
    assign_positions,
    sort_by_points,
    sort_by_class,
    group_by_category,
)
from .cache import RankingCache
from .config import ranking_config, CROSS_CLASS_CHALLENGE_LIMIT, NO_CLASS_LABEL
from .eligibility import (
    ChallengeCheck,
    ChallengeLimiter,
    MonthlyLimit,
    can_challenge,
    get_eligible_opponents,
    current_month_ref,
)
from .models import (
    ProfileRecord,
    MatchRecord,
    ChallengeRecord,
    ChallengeStatus,
    ChallengeRole,
    MatchType,
)
from .service import RankingService

__all__ = [
    "RankingCalculator",
    "PlayerStats",
    "StatBlock",
    "aggregate_stats",
    "assign_positions",
    "sort_by_points",
    "sort_by_class",
    "group_by_category",
    "RankingCache",
    "ranking_config",
    "CROSS_CLASS_CHALLENGE_LIMIT",
    "NO_CLASS_LABEL",
    "ChallengeCheck",
    "ChallengeLimiter",
    "MonthlyLimit",
    "can_challenge",
    "get_eligible_opponents",
    "current_month_ref",
    "ProfileRecord",
    "MatchRecord",
    "ChallengeRecord",
    "ChallengeStatus",
    "ChallengeRole",
    "MatchType",
    "RankingService",
]
