"""
Serviço do ranking

Busca perfis e partidas no Supabase, calcula o ranking e
mantém o cache do ranking completo.
"""
import asyncio
import time
from typing import Dict, List, Optional, TYPE_CHECKING
from loguru import logger

from .cache import RankingCache
from .calculator import PlayerStats, RankingCalculator
from .config import ranking_config
from .models import ProfileRecord, MatchRecord, parse_rows

if TYPE_CHECKING:
    from database.supabase_client import ClubDB


class RankingService:
    """Ranking do clube com cache"""

    def __init__(
        self,
        db: "ClubDB",
        calculator: Optional[RankingCalculator] = None,
        cache: Optional[RankingCache] = None
    ):
        self.db = db
        self.calculator = calculator or RankingCalculator()
        self.cache = cache or RankingCache(ttl_seconds=ranking_config.cache_ttl_seconds)

    async def fetch_ranking(
        self,
        category: Optional[str] = None,
        force_refresh: bool = False
    ) -> List[PlayerStats]:
        """
        Ranking completo (legado + desafios + SuperSets)

        Args:
            category: filtra os perfis por classe (sempre recalcula)
            force_refresh: ignora o cache

        Returns:
            Lista na ordem do Ranking Geral; [] se a leitura falhar
        """
        start_time = time.perf_counter()

        if not category and not force_refresh:
            cached = self.cache.get()
            if cached is not None:
                return cached

        profile_rows, match_rows = await asyncio.gather(
            self.db.fetch_ranked_profiles(category),
            self.db.fetch_finished_matches(),
        )

        if profile_rows is None or match_rows is None:
            logger.error("fetch_ranking falhou: leitura de perfis/partidas")
            return []

        profiles = parse_rows(ProfileRecord, profile_rows)
        matches = parse_rows(MatchRecord, match_rows)
        ranking = self.calculator.calculate_rankings(profiles, matches)

        if not category:
            self.cache.set(ranking)

        duration = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"fetch_ranking completo: {len(ranking)} jogadores, {len(matches)} partidas "
            f"em {duration:.2f}ms (classe={category or 'todas'})"
        )
        return ranking

    async def fetch_ranking_by_category(self, force_refresh: bool = False) -> Dict[str, List[PlayerStats]]:
        """Ranking agrupado por classe"""
        ranking = await self.fetch_ranking(force_refresh=force_refresh)
        return self.calculator.group_by_category(ranking)

    async def get_player(self, player_id: str, force_refresh: bool = False) -> Optional[PlayerStats]:
        """Estatísticas de um jogador"""
        ranking = await self.fetch_ranking(force_refresh=force_refresh)
        return next((p for p in ranking if p.id == player_id), None)
