"""
Cache do ranking com TTL

Guarda o último ranking completo (sem filtro de classe) e o momento em que
foi calculado. Não há invalidação por escrita: quem acabou de gravar e
precisa do efeito imediato deve pedir force_refresh.
"""
import time
from typing import Callable, List, Optional, Tuple
from loguru import logger

from .calculator import PlayerStats


class RankingCache:
    """Cache de um único ranking com TTL"""

    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entry: Optional[Tuple[float, List[PlayerStats]]] = None  # (timestamp, data)

    def get(self) -> Optional[List[PlayerStats]]:
        """Ranking em cache, ou None se vazio/expirado"""
        if self._entry is None:
            return None

        timestamp, data = self._entry
        age = self._clock() - timestamp
        if age < self.ttl_seconds:
            logger.debug(f"ranking cache hit (age {age * 1000:.0f}ms)")
            return data

        logger.debug(f"ranking cache expired (age {age * 1000:.0f}ms)")
        return None

    def set(self, data: List[PlayerStats]) -> None:
        self._entry = (self._clock(), data)

    def clear(self) -> None:
        """Limpa o cache"""
        if self._entry is not None:
            logger.info("Limpando cache do ranking")
        self._entry = None

    @property
    def age(self) -> Optional[float]:
        """Idade do cache em segundos"""
        if self._entry is None:
            return None
        return self._clock() - self._entry[0]
