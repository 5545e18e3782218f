"""
API Dependencies

Instâncias dos serviços (criadas sob demanda e reaproveitadas)
"""

from functools import lru_cache

from database.supabase_client import ClubDB
from ranking.eligibility import ChallengeLimiter
from ranking.service import RankingService
from .challenges.service import ChallengeService


@lru_cache()
def get_club_db() -> ClubDB:
    return ClubDB()


@lru_cache()
def get_ranking_service() -> RankingService:
    return RankingService(get_club_db())


@lru_cache()
def get_challenge_limiter() -> ChallengeLimiter:
    return ChallengeLimiter(get_club_db())


@lru_cache()
def get_challenge_service() -> ChallengeService:
    return ChallengeService(get_club_db(), get_ranking_service(), get_challenge_limiter())
