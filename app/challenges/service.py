"""
Challenge Service

Fluxo de desafios: criar (com validação de posição e cota mensal),
aceitar, recusar, cancelar e listar
"""

from dataclasses import dataclass
from typing import Optional, List
from loguru import logger

from database.supabase_client import ClubDB
from ranking.eligibility import ChallengeLimiter
from ranking.models import ChallengeRecord, ChallengeStatus, parse_rows
from ranking.service import RankingService


# Abas da tela de desafios
TAB_STATUSES = {
    "active": ChallengeStatus.open_values(),
    "history": ChallengeStatus.closed_values(),
}


@dataclass
class ChallengeResult:
    """Resultado de uma operação de desafio"""
    success: bool
    challenge: Optional[ChallengeRecord] = None
    error: Optional[str] = None
    not_found: bool = False


class ChallengeService:
    """Serviço de desafios"""

    def __init__(
        self,
        db: ClubDB,
        ranking_service: RankingService,
        limiter: ChallengeLimiter
    ):
        self.db = db
        self.ranking_service = ranking_service
        self.limiter = limiter

    # =============================================
    # Criação
    # =============================================

    async def create_challenge(
        self,
        challenger_id: str,
        challenged_id: str,
        scheduled_date: Optional[str],
        scheduled_time: Optional[str],
        court_id: Optional[str]
    ) -> ChallengeResult:
        """
        Cria um desafio "proposed" no mês atual

        - ranking recalculado (force_refresh) antes de validar
        - regra de posição + cota do desafiante + cota do desafiado
        """
        if not scheduled_date or not scheduled_time or not court_id:
            return ChallengeResult(False, error="Preencha todos os campos de agendamento")

        ranking = await self.ranking_service.fetch_ranking(force_refresh=True)
        players = {p.id: p for p in ranking}
        challenger = players.get(challenger_id)
        target = players.get(challenged_id)

        if challenger is None or target is None:
            return ChallengeResult(False, error="Jogador não encontrado no ranking", not_found=True)

        check = await self.limiter.can_challenge_with_limits(challenger, target)
        if not check.allowed:
            logger.info(f"challenge_blocked: {challenger_id} → {challenged_id} ({check.reason})")
            return ChallengeResult(False, error=check.reason)

        row = await self.db.insert_challenge({
            "challenger_id": challenger_id,
            "challenged_id": challenged_id,
            "status": ChallengeStatus.PROPOSED.value,
            "month_ref": self.limiter.month_ref(),
            "scheduled_date": scheduled_date,
            "scheduled_time": scheduled_time,
            "court_id": court_id,
        })
        if row is None:
            return ChallengeResult(False, error="Erro ao criar desafio")

        challenge = ChallengeRecord.model_validate(row)
        logger.info(f"challenge_created: {challenge.id} ({target.name} foi desafiado(a))")
        return ChallengeResult(True, challenge=challenge)

    # =============================================
    # Transições
    # =============================================

    async def accept_challenge(self, challenge_id: str) -> ChallengeResult:
        """Desafiado aceita"""
        return await self._transition(
            challenge_id,
            ChallengeStatus.ACCEPTED,
            allowed_from=[ChallengeStatus.PROPOSED]
        )

    async def decline_challenge(self, challenge_id: str, reason: Optional[str] = None) -> ChallengeResult:
        """Desafiado recusa"""
        return await self._transition(
            challenge_id,
            ChallengeStatus.DECLINED,
            cancel_reason=reason or "Recusado pelo desafiado"
        )

    async def cancel_challenge(self, challenge_id: str, reason: Optional[str] = None) -> ChallengeResult:
        """Desafiante cancela"""
        return await self._transition(
            challenge_id,
            ChallengeStatus.CANCELLED,
            cancel_reason=reason or "Cancelado pelo desafiante"
        )

    async def _transition(
        self,
        challenge_id: str,
        status: ChallengeStatus,
        cancel_reason: Optional[str] = None,
        allowed_from: Optional[List[ChallengeStatus]] = None
    ) -> ChallengeResult:
        """
        Muda o status de um desafio aberto

        allowed_from restringe os status de origem (por padrão, qualquer aberto)
        """
        row = await self.db.get_challenge(challenge_id)
        if row is None:
            return ChallengeResult(False, error="Desafio não encontrado", not_found=True)

        current = ChallengeRecord.model_validate(row)
        if not current.is_open:
            return ChallengeResult(
                False,
                challenge=current,
                error=f"Desafio já encerrado (status: {current.status.value})"
            )

        if allowed_from is not None and current.status not in allowed_from:
            return ChallengeResult(
                False,
                challenge=current,
                error=f"Transição inválida: {current.status.value} → {status.value}"
            )

        data = {"status": status.value}
        if cancel_reason:
            data["cancel_reason"] = cancel_reason

        updated = await self.db.update_challenge(challenge_id, data)
        if updated is None:
            return ChallengeResult(False, challenge=current, error="Erro ao atualizar desafio")

        logger.info(f"challenge_{status.value}: {challenge_id}")
        return ChallengeResult(True, challenge=ChallengeRecord.model_validate(updated))

    # =============================================
    # Listagem
    # =============================================

    async def list_challenges(self, player_id: str, tab: Optional[str] = None) -> List[ChallengeRecord]:
        """
        Desafios do jogador

        tab: "active" (proposed/accepted/scheduled), "history" (encerrados)
        ou None para todos
        """
        challenges = parse_rows(ChallengeRecord, await self.db.list_challenges(player_id))

        statuses = TAB_STATUSES.get(tab) if tab else None
        if statuses is None:
            return challenges
        return [c for c in challenges if c.status.value in statuses]
