"""
ClubDB tests (Supabase query builder substituído por um fake em memória)
"""

import pytest

from database import supabase_client
from database.supabase_client import ClubDB, get_supabase_client
from ranking.models import ChallengeRole
from conftest import FakeSupabaseClient


ANA = "0b7e6a52-3c1e-4c55-9d8a-1f2a3b4c5d01"
BIA = "0b7e6a52-3c1e-4c55-9d8a-1f2a3b4c5d02"
DUDA = "0b7e6a52-3c1e-4c55-9d8a-1f2a3b4c5d04"


@pytest.fixture
def tables():
    return {
        "profiles": [
            {"id": ANA, "name": "Ana", "category": "4ª Classe", "role": "socio", "is_active": True},
            {"id": BIA, "name": "Bia", "category": "5ª Classe", "role": "admin", "is_active": True},
            {"id": "c", "name": "Caio", "category": "5ª Classe", "role": "visitante", "is_active": True},
            {"id": DUDA, "name": "Duda", "category": "5ª Classe", "role": "socio", "is_active": False},
        ],
        "matches": [
            {"id": "m1", "type": "Desafio", "status": "finished"},
            {"id": "m2", "type": "SuperSet", "status": "finished"},
            {"id": "m3", "type": "Desafio Ranking", "status": "finished"},
            {"id": "m4", "type": "Desafio", "status": "pending"},
            {"id": "m5", "type": "Campeonato", "status": "finished"},
        ],
        "challenges": [
            {"id": "c1", "challenger_id": ANA, "challenged_id": BIA, "month_ref": "2026-03",
             "status": "proposed", "created_at": "2026-03-02T10:00:00"},
            {"id": "c2", "challenger_id": ANA, "challenged_id": DUDA, "month_ref": "2026-03",
             "status": "cancelled", "created_at": "2026-03-05T10:00:00"},
            {"id": "c3", "challenger_id": BIA, "challenged_id": ANA, "month_ref": "2026-02",
             "status": "finished", "created_at": "2026-02-10T10:00:00"},
        ],
    }


@pytest.fixture
def fake_client(tables):
    return FakeSupabaseClient(tables)


@pytest.fixture
def db(fake_client):
    return ClubDB(client=fake_client)


class TestProfilesAndMatches:
    """Leituras do ranking"""

    @pytest.mark.asyncio
    async def test_ranked_profiles(self, db):
        rows = await db.fetch_ranked_profiles()
        assert [r["id"] for r in rows] == [ANA, BIA]

    @pytest.mark.asyncio
    async def test_ranked_profiles_by_category(self, db):
        rows = await db.fetch_ranked_profiles("5ª Classe")
        assert [r["id"] for r in rows] == [BIA]

    @pytest.mark.asyncio
    async def test_finished_matches(self, db):
        rows = await db.fetch_finished_matches()
        assert [r["id"] for r in rows] == ["m1", "m2", "m3"]

    @pytest.mark.asyncio
    async def test_read_errors_return_none(self, db, fake_client):
        fake_client.fail = True

        assert await db.fetch_ranked_profiles() is None
        assert await db.fetch_finished_matches() is None


class TestChallenges:
    """Tabela challenges"""

    @pytest.mark.asyncio
    async def test_count_excludes_void_and_other_months(self, db):
        assert await db.count_challenges(ANA, ChallengeRole.CHALLENGER, "2026-03") == 1
        assert await db.count_challenges(ANA, ChallengeRole.CHALLENGED, "2026-03") == 0
        assert await db.count_challenges(ANA, ChallengeRole.CHALLENGED, "2026-02") == 1
        assert await db.count_challenges(DUDA, ChallengeRole.CHALLENGED, "2026-03") == 0

    @pytest.mark.asyncio
    async def test_count_error_returns_none(self, db, fake_client):
        fake_client.fail = True
        assert await db.count_challenges(ANA, ChallengeRole.CHALLENGER, "2026-03") is None

    @pytest.mark.asyncio
    async def test_list_newest_first(self, db):
        rows = await db.list_challenges(ANA)
        assert [r["id"] for r in rows] == ["c2", "c1", "c3"]

    @pytest.mark.asyncio
    async def test_list_error_returns_empty(self, db, fake_client):
        fake_client.fail = True
        assert await db.list_challenges(ANA) == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("player_id", [
        f"{ANA},status.eq.finished",
        "x)",
        "a",
        f"{{{ANA}}}",
    ])
    async def test_list_rejects_non_uuid_ids(self, db, fake_client, player_id):
        """IDs fora do formato UUID não chegam ao filtro or_"""
        assert await db.list_challenges(player_id) == []
        assert fake_client.executed == []

    def test_is_valid_id(self):
        assert supabase_client.is_valid_id(ANA) is True
        assert supabase_client.is_valid_id(ANA.upper()) is True
        assert supabase_client.is_valid_id(ANA.replace("-", "")) is False
        assert supabase_client.is_valid_id("") is False
        assert supabase_client.is_valid_id(None) is False

    @pytest.mark.asyncio
    async def test_get_challenge(self, db):
        assert (await db.get_challenge("c3"))["challenger_id"] == BIA
        assert await db.get_challenge("missing") is None

    @pytest.mark.asyncio
    async def test_insert_and_update(self, db, tables):
        row = await db.insert_challenge({
            "challenger_id": BIA, "challenged_id": ANA, "month_ref": "2026-03", "status": "proposed"
        })
        assert row["id"] == "challenges-4"
        assert len(tables["challenges"]) == 4

        updated = await db.update_challenge(row["id"], {"status": "accepted"})
        assert updated["status"] == "accepted"

    @pytest.mark.asyncio
    async def test_update_missing_returns_none(self, db):
        assert await db.update_challenge("missing", {"status": "accepted"}) is None

    @pytest.mark.asyncio
    async def test_write_errors_return_none(self, db, fake_client):
        fake_client.fail = True

        assert await db.insert_challenge({"challenger_id": ANA}) is None
        assert await db.update_challenge("c1", {"status": "accepted"}) is None
        assert await db.get_challenge("c1") is None


class TestClientSingleton:
    """get_supabase_client"""

    def test_missing_credentials(self, monkeypatch):
        monkeypatch.setattr(supabase_client, "_supabase_client", None)
        monkeypatch.setattr(supabase_client.supabase_config, "supabase_url", "")
        monkeypatch.setattr(supabase_client.supabase_config, "supabase_key", "")

        with pytest.raises(ValueError):
            get_supabase_client()

    def test_reuses_instance(self, monkeypatch):
        sentinel = FakeSupabaseClient()
        monkeypatch.setattr(supabase_client, "_supabase_client", sentinel)

        assert get_supabase_client() is sentinel
        assert ClubDB().client is sentinel
