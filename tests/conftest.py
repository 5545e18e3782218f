"""
Pytest configuration and fixtures for STC Play tests
"""

import pytest
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from ranking.cache import RankingCache
from ranking.calculator import RankingCalculator
from ranking.eligibility import ChallengeLimiter
from ranking.models import ProfileRecord, MatchRecord, ChallengeRole, ChallengeStatus
from ranking.service import RankingService


CLASS_ORDER = ["4ª Classe", "5ª Classe", "6ª Classe"]
NOW = datetime(2026, 3, 15, 10, 0, 0)
MONTH_REF = "2026-03"


# =============================================================================
# Record helpers
# =============================================================================

def make_profile(player_id: str, category: Optional[str] = "5ª Classe", **legacy) -> ProfileRecord:
    """ProfileRecord com contadores legados opcionais (wins=3 → legacy_wins=3)"""
    data = {"id": player_id, "name": f"Jogador {player_id}", "category": category}
    data.update({f"legacy_{k}": v for k, v in legacy.items()})
    return ProfileRecord(**data)


def make_match(
    player_a: str,
    player_b: str,
    score_a: List[int],
    score_b: List[int],
    winner: Optional[str],
    match_type: str = "Desafio",
    status: str = "finished",
    match_id: str = "m1"
) -> MatchRecord:
    return MatchRecord(
        id=match_id,
        player_a_id=player_a,
        player_b_id=player_b,
        score_a=score_a,
        score_b=score_b,
        winner_id=winner,
        type=match_type,
        status=status,
    )


class FakeClock:
    """Relógio controlado pelos testes"""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


# =============================================================================
# Fake ClubDB (repositório em memória)
# =============================================================================

class FakeClubDB:
    """Implementa a interface de ClubDB sobre listas em memória"""

    def __init__(self, profiles=None, matches=None, challenges=None):
        self.profiles: List[Dict[str, Any]] = profiles or []
        self.matches: List[Dict[str, Any]] = matches or []
        self.challenges: List[Dict[str, Any]] = challenges or []
        self.fail_reads = False
        self.fail_counts = False
        self.calls: List[str] = []

    async def fetch_ranked_profiles(self, category=None):
        self.calls.append("profiles")
        if self.fail_reads:
            return None
        return [p for p in self.profiles if not category or p.get("category") == category]

    async def fetch_finished_matches(self):
        self.calls.append("matches")
        if self.fail_reads:
            return None
        return list(self.matches)

    async def count_challenges(self, player_id, role: ChallengeRole, month_ref):
        self.calls.append(f"count:{role.value}:{player_id}")
        if self.fail_counts:
            return None
        return sum(
            1 for c in self.challenges
            if c[role.column] == player_id
            and c["month_ref"] == month_ref
            and c["status"] not in ChallengeStatus.void_values()
        )

    async def list_challenges(self, player_id):
        return [
            c for c in self.challenges
            if player_id in (c["challenger_id"], c["challenged_id"])
        ]

    async def get_challenge(self, challenge_id):
        return next((c for c in self.challenges if c.get("id") == challenge_id), None)

    async def insert_challenge(self, data):
        row = dict(data, id=f"c{len(self.challenges) + 1}")
        self.challenges.append(row)
        return row

    async def update_challenge(self, challenge_id, data):
        row = await self.get_challenge(challenge_id)
        if row is None:
            return None
        row.update(data)
        return row


# =============================================================================
# Fake Supabase client (query builder)
# =============================================================================

class FakeQuery:
    """Subconjunto do query builder do postgrest usado pelo ClubDB"""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table_name = table
        self.filters = []
        self.operation = "select"
        self.payload = None
        self.order_by = None
        self._negate = False

    def _add(self, predicate):
        if self._negate:
            self.filters.append(lambda row, p=predicate: not p(row))
            self._negate = False
        else:
            self.filters.append(predicate)
        return self

    def select(self, columns="*", count=None):
        self.operation = "select"
        return self

    def insert(self, data):
        self.operation = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.operation = "update"
        self.payload = data
        return self

    def eq(self, column, value):
        return self._add(lambda row, c=column, v=value: row.get(c) == v)

    def in_(self, column, values):
        return self._add(lambda row, c=column, v=tuple(values): row.get(c) in v)

    @property
    def not_(self):
        self._negate = True
        return self

    def or_(self, expression):
        conditions = []
        for part in expression.split(","):
            column, _, value = part.split(".", 2)
            conditions.append((column, value))
        return self._add(lambda row, cs=tuple(conditions): any(str(row.get(c)) == v for c, v in cs))

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def execute(self):
        self.client.executed.append((self.table_name, self.operation))
        if self.client.fail:
            raise Exception("connection refused")

        rows = self.client.tables.setdefault(self.table_name, [])
        if self.operation == "insert":
            row = dict(self.payload, id=f"{self.table_name}-{len(rows) + 1}")
            rows.append(row)
            return SimpleNamespace(data=[row], count=None)

        matched = [r for r in rows if all(f(r) for f in self.filters)]
        if self.operation == "update":
            for row in matched:
                row.update(self.payload)

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        return SimpleNamespace(data=matched, count=len(matched))


class FakeSupabaseClient:
    def __init__(self, tables: Optional[Dict[str, List[Dict[str, Any]]]] = None):
        self.tables = tables or {}
        self.executed = []
        self.fail = False

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def calculator():
    return RankingCalculator(class_order=CLASS_ORDER, challenge_win_points=100, superset_win_points=10)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture(scope="function")
def sample_profile_rows():
    """Três jogadores: X e Y na 4ª Classe, Z na 5ª Classe"""
    return [
        {"id": "x", "name": "Xavier", "category": "4ª Classe", "avatar_url": None,
         "legacy_wins": 3, "legacy_points": 300},
        {"id": "y", "name": "Yara", "category": "4ª Classe", "avatar_url": None,
         "legacy_wins": 1, "legacy_points": 100},
        {"id": "z", "name": "Zeca", "category": "5ª Classe", "avatar_url": None,
         "legacy_wins": 10, "legacy_points": 1000},
    ]


@pytest.fixture
def fake_db(sample_profile_rows):
    return FakeClubDB(profiles=sample_profile_rows)


@pytest.fixture
def ranking_service(fake_db, calculator, fake_clock):
    return RankingService(
        fake_db,
        calculator=calculator,
        cache=RankingCache(ttl_seconds=30, clock=fake_clock)
    )


@pytest.fixture
def limiter(fake_db):
    return ChallengeLimiter(
        fake_db,
        clock=lambda: NOW,
        max_sent=1,
        max_received=1,
        position_window=3
    )
