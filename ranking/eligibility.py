"""
Regras de desafio

- Posição: só pode desafiar quem está a até 3 posições (acima ou abaixo)
  no Ranking Geral. Classe e pontos não importam, só a posição geral.
- Limite mensal: 1 desafio enviado e 1 desafio recebido por mês
  (desafios cancelados, expirados ou recusados não contam).

Nenhuma função aqui levanta exceção para "não pode desafiar" ou
"sem dados": o resultado sempre traz allowed/reason.
"""
import asyncio
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Callable, Dict, Any, List, Optional, TYPE_CHECKING
from zoneinfo import ZoneInfo
from loguru import logger

from .calculator import PlayerStats
from .config import ranking_config
from .models import ChallengeRole

if TYPE_CHECKING:
    from database.supabase_client import ClubDB


@dataclass
class ChallengeCheck:
    """Resultado da validação de um desafio"""
    allowed: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MonthlyLimit:
    """Cota mensal de um jogador"""
    can_challenge_others: bool
    can_be_challenged: bool
    challenges_made: int = 0
    challenges_received: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def current_month_ref(now: datetime) -> str:
    """YYYY-MM do instante informado"""
    return now.strftime("%Y-%m")


# =====================================================
# Regra de posição (síncrona)
# =====================================================

def can_challenge(
    challenger: PlayerStats,
    target: PlayerStats,
    window: Optional[int] = None
) -> ChallengeCheck:
    """Regra de posição no Ranking Geral (simétrica)"""
    if window is None:
        window = ranking_config.position_window

    if challenger.id == target.id:
        return ChallengeCheck(False, "Não pode desafiar a si mesmo")

    if not challenger.global_position or not target.global_position:
        return ChallengeCheck(False, "Erro: Posição no ranking não calculada")

    diff = abs(challenger.global_position - target.global_position)
    if diff <= window:
        return ChallengeCheck(True)

    return ChallengeCheck(
        False,
        f"Só pode desafiar jogadores até {window} posições de distância no Ranking Geral "
        f"(diferença atual: {diff} posições)"
    )


def get_eligible_opponents(
    challenger_id: str,
    players: List[PlayerStats],
    window: Optional[int] = None
) -> List[PlayerStats]:
    """
    Adversários permitidos pela regra de posição

    Não considera o limite mensal; use ChallengeLimiter.get_available_opponents
    para a lista filtrada pela cota do adversário.
    """
    challenger = next((p for p in players if p.id == challenger_id), None)
    if challenger is None:
        return []

    return [
        target for target in players
        if can_challenge(challenger, target, window).allowed
    ]


# =====================================================
# Limite mensal (assíncrono)
# =====================================================

class ChallengeLimiter:
    """
    Limite mensal de desafios + validação completa

    A verificação é leitura-depois-escrita, sem transação: dois desafios
    criados ao mesmo tempo contra o mesmo jogador podem passar os dois.
    Garantia rígida só com restrição de unicidade no banco.
    """

    def __init__(
        self,
        db: "ClubDB",
        clock: Optional[Callable[[], datetime]] = None,
        max_sent: Optional[int] = None,
        max_received: Optional[int] = None,
        position_window: Optional[int] = None
    ):
        self.db = db
        self._clock = clock or (lambda: datetime.now(ZoneInfo(ranking_config.timezone)))
        self.max_sent = ranking_config.monthly_challenges_sent if max_sent is None else max_sent
        self.max_received = (
            ranking_config.monthly_challenges_received if max_received is None else max_received
        )
        self.position_window = (
            ranking_config.position_window if position_window is None else position_window
        )

    def month_ref(self) -> str:
        return current_month_ref(self._clock())

    async def check_monthly_challenge_limit(self, player_id: str) -> MonthlyLimit:
        """
        Cota do mês atual do jogador

        Falha na leitura → bloqueia (fail closed) e registra erro.
        """
        month_ref = self.month_ref()
        sent, received = await asyncio.gather(
            self.db.count_challenges(player_id, ChallengeRole.CHALLENGER, month_ref),
            self.db.count_challenges(player_id, ChallengeRole.CHALLENGED, month_ref),
        )

        if sent is None or received is None:
            logger.error(f"check_monthly_limit_failed: {player_id} ({month_ref})")
            return MonthlyLimit(can_challenge_others=False, can_be_challenged=False)

        return MonthlyLimit(
            can_challenge_others=sent < self.max_sent,
            can_be_challenged=received < self.max_received,
            challenges_made=sent,
            challenges_received=received,
        )

    async def can_challenge_with_limits(
        self,
        challenger: PlayerStats,
        target: PlayerStats
    ) -> ChallengeCheck:
        """Regra de posição primeiro; só então as duas cotas"""
        position_check = can_challenge(challenger, target, self.position_window)
        if not position_check.allowed:
            return position_check

        challenger_limits, target_limits = await asyncio.gather(
            self.check_monthly_challenge_limit(challenger.id),
            self.check_monthly_challenge_limit(target.id),
        )

        if not challenger_limits.can_challenge_others:
            return ChallengeCheck(
                False,
                f"Você já fez {self.max_sent} desafio este mês (limite: {self.max_sent}x/mês)"
            )

        if not target_limits.can_be_challenged:
            return ChallengeCheck(
                False,
                f"Este jogador já foi desafiado este mês (limite: {self.max_received}x/mês)"
            )

        return ChallengeCheck(True)

    async def get_available_opponents(
        self,
        challenger_id: str,
        players: List[PlayerStats]
    ) -> List[PlayerStats]:
        """Adversários elegíveis que ainda podem ser desafiados este mês"""
        eligible = get_eligible_opponents(challenger_id, players, self.position_window)
        if not eligible:
            return []

        limits = await asyncio.gather(
            *(self.check_monthly_challenge_limit(p.id) for p in eligible)
        )
        return [
            player for player, limit in zip(eligible, limits)
            if limit.can_be_challenged
        ]
