"""
Configuração do STC Play

Variáveis de ambiente (.env) carregadas com pydantic-settings
"""
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field
from dotenv import load_dotenv

load_dotenv()


class SupabaseConfig(BaseSettings):
    """Configuração do Supabase"""

    supabase_url: str = Field(default="", description="Supabase Project URL")
    supabase_key: str = Field(default="", description="Supabase anon key")

    class Config:
        env_prefix = ""
        case_sensitive = False


class RankingConfig(BaseSettings):
    """Regras do ranking e dos desafios"""

    # Classes da melhor para a pior
    class_order: List[str] = Field(
        default=["4ª Classe", "5ª Classe", "6ª Classe"],
        description="Hierarquia de classes (melhor primeiro)"
    )

    # Pontuação
    challenge_win_points: int = Field(default=100, description="Pontos por vitória em desafio")
    superset_win_points: int = Field(default=10, description="Pontos por vitória em SuperSet")

    # Cache
    cache_ttl_seconds: float = Field(default=30.0, description="TTL do cache do ranking (segundos)")

    # Desafios
    position_window: int = Field(default=3, description="Distância máxima no Ranking Geral")
    monthly_challenges_sent: int = Field(default=1, description="Desafios enviados por mês")
    monthly_challenges_received: int = Field(default=1, description="Desafios recebidos por mês")

    # month_ref é calculado no fuso do clube
    timezone: str = Field(default="America/Fortaleza", description="Fuso horário do clube")

    class Config:
        env_prefix = "RANKING_"
        case_sensitive = False


class ServerConfig(BaseSettings):
    """Configuração do servidor HTTP"""

    host: str = Field(default="0.0.0.0", description="Host")
    port: int = Field(default=8000, description="Porta")
    reload: bool = Field(default=False, description="Auto reload (dev)")

    class Config:
        env_prefix = "SERVER_"
        case_sensitive = False


# Instâncias globais
supabase_config = SupabaseConfig()
ranking_config = RankingConfig()
server_config = ServerConfig()


# Constante do desenho antigo (limite entre classes): não é usada pela regra atual
CROSS_CLASS_CHALLENGE_LIMIT = 2

# Grupo para jogadores sem classe ou com classe desconhecida
NO_CLASS_LABEL = "Sem Classe"
