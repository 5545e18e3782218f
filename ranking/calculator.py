"""
Cálculo do ranking do STC Play

Junta as estatísticas legadas (campeonatos antigos) com as partidas de
desafio e SuperSet finalizadas, e ordena o resultado em duas passadas:
- posição na classe (pontos → vitórias → sets)
- posição geral (classe → pontos → vitórias → sets)
"""
from collections import defaultdict
from dataclasses import dataclass, field, asdict, replace
from typing import List, Dict, Any, Iterable, Optional, Tuple
from loguru import logger

from .config import ranking_config, NO_CLASS_LABEL
from .models import ProfileRecord, MatchRecord, MatchStatus


# =====================================================
# Constantes
# =====================================================

# Terceiro set = super tie-break
DECIDING_SET_INDEX = 2

# Classes desconhecidas ficam depois de todas as conhecidas
UNKNOWN_CLASS_RANK = 999


# =====================================================
# Data classes
# =====================================================

@dataclass
class StatBlock:
    """Bloco de estatísticas de uma origem (legado, desafio ou SuperSet)"""
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
    def from_profile(cls, profile: ProfileRecord) -> "StatBlock":
        """Copia os contadores legados do perfil sem recalcular"""
        return cls(
            wins=profile.legacy_wins,
            losses=profile.legacy_losses,
            sets_won=profile.legacy_sets_won,
            sets_lost=profile.legacy_sets_lost,
            games_won=profile.legacy_games_won,
            games_lost=profile.legacy_games_lost,
            tiebreaks_won=profile.legacy_tiebreaks_won,
            tiebreaks_lost=profile.legacy_tiebreaks_lost,
            matches_played=profile.legacy_matches_played,
            matches_with_tiebreak=profile.legacy_matches_with_tiebreak,
            points=profile.legacy_points,
        )


@dataclass
class PlayerStats:
    """Estatísticas combinadas de um jogador"""
    id: str
    name: str
    category: Optional[str]
    avatar_url: Optional[str]
    legacy: StatBlock = field(default_factory=StatBlock)
    challenge: StatBlock = field(default_factory=StatBlock)
    superset: StatBlock = field(default_factory=StatBlock)
    category_position: int = 0
    global_position: int = 0

    def _total(self, attr: str) -> int:
        return (
            getattr(self.legacy, attr)
            + getattr(self.challenge, attr)
            + getattr(self.superset, attr)
        )

    # Totais = legado + desafio + SuperSet
    @property
    def total_wins(self) -> int:
        return self._total("wins")

    @property
    def total_losses(self) -> int:
        return self._total("losses")

    @property
    def total_sets_won(self) -> int:
        return self._total("sets_won")

    @property
    def total_sets_lost(self) -> int:
        return self._total("sets_lost")

    @property
    def total_games_won(self) -> int:
        return self._total("games_won")

    @property
    def total_games_lost(self) -> int:
        return self._total("games_lost")

    @property
    def total_points(self) -> int:
        return self._total("points")

    @property
    def total_matches_played(self) -> int:
        return self._total("matches_played")

    def to_dict(self) -> Dict[str, Any]:
        """Dicionário plano (legacy_*, challenge_*, superset_*, total_*)"""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "avatar_url": self.avatar_url,
        }
        for prefix, block in (
            ("legacy", self.legacy),
            ("challenge", self.challenge),
            ("superset", self.superset),
        ):
            for key, value in asdict(block).items():
                data[f"{prefix}_{key}"] = value

        data.update({
            "total_wins": self.total_wins,
            "total_losses": self.total_losses,
            "total_sets_won": self.total_sets_won,
            "total_sets_lost": self.total_sets_lost,
            "total_games_won": self.total_games_won,
            "total_games_lost": self.total_games_lost,
            "total_points": self.total_points,
            "total_matches_played": self.total_matches_played,
            "category_position": self.category_position,
            "global_position": self.global_position,
        })
        return data


# =====================================================
# Funções auxiliares
# =====================================================

def class_rank(category: Optional[str], class_order: List[str]) -> int:
    """Índice da classe na hierarquia (desconhecida = por último)"""
    if category in class_order:
        return class_order.index(category)
    return UNKNOWN_CLASS_RANK


def category_key(category: Optional[str], class_order: List[str]) -> str:
    """Grupo usado na posição por classe (fora da hierarquia = "Sem Classe")"""
    if category in class_order:
        return category
    return NO_CLASS_LABEL


def has_tiebreak(score_a: List[int], score_b: List[int]) -> bool:
    """Partida com tie-break: terceiro set ou algum set 7-6"""
    if max(len(score_a), len(score_b)) > DECIDING_SET_INDEX:
        return True
    return any(
        (a, b) in ((7, 6), (6, 7))
        for a, b in zip(score_a, score_b)
    )


def _set_games(score: List[int], index: int) -> int:
    if index < len(score):
        return score[index]
    return 0


def apply_match(
    match: MatchRecord,
    block_a: StatBlock,
    block_b: StatBlock,
    win_points: int
) -> None:
    """Acumula uma partida finalizada nos blocos dos dois jogadores"""
    block_a.matches_played += 1
    block_b.matches_played += 1

    if has_tiebreak(match.score_a, match.score_b):
        block_a.matches_with_tiebreak += 1
        block_b.matches_with_tiebreak += 1

    for i in range(match.set_count):
        games_a = _set_games(match.score_a, i)
        games_b = _set_games(match.score_b, i)

        # Games
        block_a.games_won += games_a
        block_a.games_lost += games_b
        block_b.games_won += games_b
        block_b.games_lost += games_a

        if games_a == games_b:
            continue

        winner, loser = (block_a, block_b) if games_a > games_b else (block_b, block_a)
        winner.sets_won += 1
        loser.sets_lost += 1

        # Super tie-break conta sempre como tie-break; sets normais só no 7-6
        if i == DECIDING_SET_INDEX or {games_a, games_b} == {7, 6}:
            winner.tiebreaks_won += 1
            loser.tiebreaks_lost += 1

    # Vitória/derrota vem do winner_id gravado, não do placar
    if match.winner_id == match.player_a_id:
        winner, loser = block_a, block_b
    elif match.winner_id == match.player_b_id:
        winner, loser = block_b, block_a
    else:
        logger.warning(
            f"Partida {match.id or '?'}: winner_id {match.winner_id!r} não é nenhum dos jogadores "
            f"({match.player_a_id}, {match.player_b_id}); sem vitória/derrota/pontos"
        )
        return

    winner.wins += 1
    loser.losses += 1
    winner.points += win_points


# =====================================================
# Agregação
# =====================================================

def aggregate_stats(
    profiles: Iterable[ProfileRecord],
    matches: Iterable[MatchRecord],
    challenge_win_points: int = 100,
    superset_win_points: int = 10
) -> List[PlayerStats]:
    """
    Gera um PlayerStats por perfil

    Args:
        profiles: perfis elegíveis (ativos, sócio/admin)
        matches: partidas finalizadas (Desafio, Desafio Ranking, SuperSet)
        challenge_win_points: pontos por vitória em desafio
        superset_win_points: pontos por vitória em SuperSet

    Returns:
        Lista na ordem dos perfis, sem posições
    """
    players: Dict[str, PlayerStats] = {}
    for profile in profiles:
        players[profile.id] = PlayerStats(
            id=profile.id,
            name=profile.name,
            category=profile.category,
            avatar_url=profile.avatar_url,
            legacy=StatBlock.from_profile(profile),
        )

    skipped = 0
    for match in matches:
        if match.status != MatchStatus.FINISHED.value or not match.is_ranked:
            continue

        player_a = players.get(match.player_a_id)
        player_b = players.get(match.player_b_id)
        if player_a is None or player_b is None:
            skipped += 1
            logger.warning(
                f"Partida {match.id or '?'} ignorada: jogador fora do ranking "
                f"({match.player_a_id}, {match.player_b_id})"
            )
            continue

        if match.is_superset:
            apply_match(match, player_a.superset, player_b.superset, superset_win_points)
        else:
            apply_match(match, player_a.challenge, player_b.challenge, challenge_win_points)

    if skipped:
        logger.info(f"{skipped} partidas ignoradas na agregação")

    return list(players.values())


# =====================================================
# Ordenação
# =====================================================

def _points_key(player: PlayerStats) -> Tuple[int, int, int]:
    return (-player.total_points, -player.total_wins, -player.total_sets_won)


def sort_by_points(players: Iterable[PlayerStats]) -> List[PlayerStats]:
    """Pontos → vitórias → sets vencidos (estável)"""
    return sorted(players, key=_points_key)


def sort_by_class(players: Iterable[PlayerStats], class_order: List[str]) -> List[PlayerStats]:
    """Classe → pontos → vitórias → sets vencidos (estável)"""
    return sorted(
        players,
        key=lambda p: (class_rank(p.category, class_order),) + _points_key(p)
    )


def assign_positions(players: Iterable[PlayerStats], class_order: List[str]) -> List[PlayerStats]:
    """
    Atribui category_position e global_position

    Cada passada é uma ordenação independente que gera novos objetos.

    Returns:
        Lista na ordem do Ranking Geral
    """
    counters: Dict[str, int] = defaultdict(int)
    with_category: List[PlayerStats] = []
    for player in sort_by_points(players):
        key = category_key(player.category, class_order)
        counters[key] += 1
        with_category.append(replace(player, category_position=counters[key]))

    return [
        replace(player, global_position=index)
        for index, player in enumerate(sort_by_class(with_category, class_order), 1)
    ]


def group_by_category(
    players: Iterable[PlayerStats],
    class_order: List[str]
) -> Dict[str, List[PlayerStats]]:
    """
    Agrupa por classe

    Todas as classes conhecidas aparecem (mesmo vazias); "Sem Classe"
    só aparece quando há jogadores sem classe conhecida.
    """
    players = list(players)
    grouped: Dict[str, List[PlayerStats]] = {}

    for category in class_order:
        grouped[category] = sorted(
            (p for p in players if p.category == category),
            key=lambda p: p.category_position
        )

    no_class = [p for p in players if category_key(p.category, class_order) == NO_CLASS_LABEL]
    if no_class:
        grouped[NO_CLASS_LABEL] = sorted(no_class, key=lambda p: p.category_position)

    return grouped


# =====================================================
# Calculadora
# =====================================================

class RankingCalculator:
    """Calculadora do ranking do clube"""

    def __init__(
        self,
        class_order: Optional[List[str]] = None,
        challenge_win_points: Optional[int] = None,
        superset_win_points: Optional[int] = None
    ):
        self.class_order = list(class_order or ranking_config.class_order)
        self.challenge_win_points = (
            ranking_config.challenge_win_points if challenge_win_points is None else challenge_win_points
        )
        self.superset_win_points = (
            ranking_config.superset_win_points if superset_win_points is None else superset_win_points
        )

    def calculate_rankings(
        self,
        profiles: Iterable[ProfileRecord],
        matches: Iterable[MatchRecord]
    ) -> List[PlayerStats]:
        """Agrega e ordena; retorna na ordem do Ranking Geral"""
        stats = aggregate_stats(
            profiles,
            matches,
            challenge_win_points=self.challenge_win_points,
            superset_win_points=self.superset_win_points,
        )
        return assign_positions(stats, self.class_order)

    def group_by_category(self, players: Iterable[PlayerStats]) -> Dict[str, List[PlayerStats]]:
        return group_by_category(players, self.class_order)

    def print_ranking_summary(self, rankings: List[PlayerStats], title: str = "", top_n: int = 20):
        """Resumo do ranking no terminal"""
        print(f"\n{'='*72}")
        print(f" {title}")
        print(f"{'='*72}")
        print(f"{'Geral':>5} {'Cls':>4} {'Nome':<22} {'Classe':<11} {'Pontos':>7} {'V':>4} {'D':>4} {'Sets':>5}")
        print(f"{'-'*72}")

        for r in rankings[:top_n]:
            name = r.name if len(r.name) <= 20 else r.name[:20] + ".."
            category = r.category or NO_CLASS_LABEL
            print(
                f"{r.global_position:>5} {r.category_position:>4} {name:<22} {category:<11} "
                f"{r.total_points:>7} {r.total_wins:>4} {r.total_losses:>4} {r.total_sets_won:>5}"
            )
