"""
STC Play - linha de comando do ranking
"""
import asyncio
import json
import sys
from loguru import logger

from database.supabase_client import ClubDB
from ranking.config import NO_CLASS_LABEL, server_config
from ranking.eligibility import ChallengeLimiter, get_eligible_opponents
from ranking.service import RankingService


# Configuração de logs
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    level="INFO"
)
logger.add(
    "logs/stc_play_{time:YYYY-MM-DD}.log",
    rotation="1 day",
    retention="30 days",
    level="DEBUG"
)


async def show_ranking(service: RankingService, category: str = None, top: int = 20, as_json: bool = False):
    """Ranking Geral (ou de uma classe)"""
    ranking = await service.fetch_ranking(category=category, force_refresh=True)

    if as_json:
        print(json.dumps([p.to_dict() for p in ranking], ensure_ascii=False, indent=2))
        return

    title = f"Ranking {category}" if category else "Ranking Geral"
    service.calculator.print_ranking_summary(ranking, title=title, top_n=top)


async def show_ranking_by_category(service: RankingService, top: int = 20):
    """Ranking de cada classe"""
    grouped = await service.fetch_ranking_by_category(force_refresh=True)
    for category, players in grouped.items():
        service.calculator.print_ranking_summary(players, title=category or NO_CLASS_LABEL, top_n=top)


async def show_opponents(service: RankingService, limiter: ChallengeLimiter, player_id: str, with_limits: bool = False):
    """Adversários que o jogador pode desafiar"""
    ranking = await service.fetch_ranking(force_refresh=True)
    player = next((p for p in ranking if p.id == player_id), None)
    if player is None:
        logger.error(f"Jogador {player_id} não encontrado no ranking")
        return

    limits = await limiter.check_monthly_challenge_limit(player_id)
    print(
        f"\n{player.name} (#{player.global_position} geral) - mês {limiter.month_ref()}: "
        f"{limits.challenges_made} enviado(s), {limits.challenges_received} recebido(s)"
    )
    if not limits.can_challenge_others:
        print("Limite de desafios enviados atingido este mês")

    if with_limits:
        opponents = await limiter.get_available_opponents(player_id, ranking)
    else:
        opponents = get_eligible_opponents(player_id, ranking, limiter.position_window)

    service.calculator.print_ranking_summary(opponents, title="Adversários elegíveis", top_n=len(opponents))


async def main():
    """Entrada principal"""
    import argparse

    parser = argparse.ArgumentParser(description="STC Play - ranking e desafios")
    parser.add_argument(
        "command",
        choices=["ranking", "by-category", "opponents", "serve"],
        help="ranking: Ranking Geral, by-category: por classe, opponents: adversários, serve: API"
    )
    parser.add_argument("--category", type=str, help="Classe (ex.: '5ª Classe')")
    parser.add_argument("--player", type=str, help="ID do jogador (opponents)")
    parser.add_argument("--with-limits", action="store_true", help="Aplicar cota mensal do adversário")
    parser.add_argument("--top", type=int, default=20, help="Quantos jogadores mostrar")
    parser.add_argument("--json", action="store_true", help="Saída em JSON")

    args = parser.parse_args()

    if args.command == "serve":
        import uvicorn

        config = uvicorn.Config(
            "app.server:app",
            host=server_config.host,
            port=server_config.port,
            log_level="info"
        )
        await uvicorn.Server(config).serve()
        return

    db = ClubDB()
    service = RankingService(db)

    if args.command == "ranking":
        await show_ranking(service, category=args.category, top=args.top, as_json=args.json)
    elif args.command == "by-category":
        await show_ranking_by_category(service, top=args.top)
    elif args.command == "opponents":
        if not args.player:
            parser.error("opponents exige --player")
        await show_opponents(service, ChallengeLimiter(db), args.player, with_limits=args.with_limits)


if __name__ == "__main__":
    asyncio.run(main())
