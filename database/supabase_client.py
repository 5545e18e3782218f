"""
Cliente do banco Supabase
"""
import uuid
from typing import List, Optional, Dict, Any
from supabase import create_client, Client
from loguru import logger

from ranking.config import supabase_config
from ranking.models import MatchType, MatchStatus, ChallengeStatus, ChallengeRole, RANKED_ROLES


PROFILE_COLUMNS = (
    "id, name, category, avatar_url, "
    "legacy_wins, legacy_losses, legacy_sets_won, legacy_sets_lost, "
    "legacy_games_won, legacy_games_lost, legacy_tiebreaks_won, legacy_tiebreaks_lost, "
    "legacy_matches_played, legacy_matches_with_tiebreak, legacy_points"
)

MATCH_COLUMNS = "id, player_a_id, player_b_id, score_a, score_b, winner_id, type, status"


def is_valid_id(value: str) -> bool:
    """IDs de perfil são UUIDs; qualquer outra coisa não entra em filtros do PostgREST"""
    try:
        return str(uuid.UUID(value)) == value.lower()
    except (TypeError, ValueError, AttributeError):
        return False


# Cliente singleton
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Instância do cliente Supabase (singleton)
    """
    global _supabase_client
    if _supabase_client is None:
        if not supabase_config.supabase_url or not supabase_config.supabase_key:
            raise ValueError("Defina as variáveis de ambiente SUPABASE_URL e SUPABASE_KEY")
        _supabase_client = create_client(
            supabase_config.supabase_url,
            supabase_config.supabase_key
        )
    return _supabase_client


class ClubDB:
    """
    Acesso às tabelas do clube (profiles, matches, challenges)

    Erros de leitura são registrados e devolvidos como None/lista vazia;
    nenhuma exceção do Supabase sobe para o ranking.

    Os métodos são async, mas o cliente é síncrono: cada execute() bloqueia
    o event loop, e chamadas agrupadas com asyncio.gather rodam em sequência.
    """

    def __init__(self, client: Optional[Client] = None):
        self.client: Client = client or get_supabase_client()

    # ==================== Perfis ====================

    async def fetch_ranked_profiles(self, category: Optional[str] = None) -> Optional[List[Dict[str, Any]]]:
        """Perfis ativos de sócios/admins (opcionalmente de uma classe)"""
        try:
            query = self.client.table("profiles").select(PROFILE_COLUMNS).in_(
                "role", RANKED_ROLES
            ).eq("is_active", True)

            if category:
                query = query.eq("category", category)

            result = query.execute()
            logger.debug(f"fetch_ranking_profiles: {len(result.data or [])} perfis")
            return result.data or []
        except Exception as e:
            logger.error(f"Erro ao buscar perfis do ranking: {e}")
            return None

    # ==================== Partidas ====================

    async def fetch_finished_matches(self) -> Optional[List[Dict[str, Any]]]:
        """Partidas finalizadas de Desafio / Desafio Ranking / SuperSet"""
        try:
            result = self.client.table("matches").select(MATCH_COLUMNS).in_(
                "type", MatchType.ranked_values()
            ).eq("status", MatchStatus.FINISHED.value).execute()
            logger.debug(f"fetch_ranking_matches: {len(result.data or [])} partidas")
            return result.data or []
        except Exception as e:
            logger.error(f"Erro ao buscar partidas do ranking: {e}")
            return None

    # ==================== Desafios ====================

    async def count_challenges(
        self,
        player_id: str,
        role: ChallengeRole,
        month_ref: str
    ) -> Optional[int]:
        """Desafios do mês em que o jogador é desafiante/desafiado (sem os anulados)"""
        try:
            result = self.client.table("challenges").select("id").eq(
                role.column, player_id
            ).eq("month_ref", month_ref).not_.in_(
                "status", ChallengeStatus.void_values()
            ).execute()
            return len(result.data or [])
        except Exception as e:
            logger.error(f"Erro ao contar desafios ({role.value}, {player_id}, {month_ref}): {e}")
            return None

    async def list_challenges(self, player_id: str) -> List[Dict[str, Any]]:
        """Desafios do jogador (enviados e recebidos), mais recentes primeiro"""
        # or_ monta o filtro como texto: vírgulas ou parênteses no ID virariam cláusulas
        if not is_valid_id(player_id):
            logger.warning(f"list_challenges: ID de jogador inválido {player_id!r}")
            return []

        try:
            result = self.client.table("challenges").select("*").or_(
                f"challenger_id.eq.{player_id},challenged_id.eq.{player_id}"
            ).order("created_at", desc=True).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Erro ao listar desafios de {player_id}: {e}")
            return []

    async def get_challenge(self, challenge_id: str) -> Optional[Dict[str, Any]]:
        """Desafio pelo ID"""
        try:
            result = self.client.table("challenges").select("*").eq(
                "id", challenge_id
            ).execute()

            if result.data:
                return result.data[0]
            return None
        except Exception as e:
            logger.error(f"Erro ao buscar desafio {challenge_id}: {e}")
            return None

    async def insert_challenge(self, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Cria um desafio e retorna a linha gravada"""
        try:
            result = self.client.table("challenges").insert(data).execute()
            if result.data:
                return result.data[0]
            return None
        except Exception as e:
            logger.error(f"Erro ao criar desafio: {e}")
            return None

    async def update_challenge(self, challenge_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Atualiza um desafio e retorna a linha gravada"""
        try:
            result = self.client.table("challenges").update(data).eq(
                "id", challenge_id
            ).execute()
            if result.data:
                return result.data[0]
            return None
        except Exception as e:
            logger.error(f"Erro ao atualizar desafio {challenge_id}: {e}")
            return None
