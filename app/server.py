"""
STC Play - servidor FastAPI
Ranking do clube + desafios

Fonte de dados: Supabase
"""
from fastapi import FastAPI, Depends
from loguru import logger

from ranking.config import ranking_config, server_config
from ranking.service import RankingService
from .dependencies import get_ranking_service
from .rankings.router import router as rankings_router
from .challenges.router import router as challenges_router

# FastAPI app
app = FastAPI(
    title="STC Play",
    description="Ranking e desafios do clube (legado + desafios + SuperSets)",
    version="1.0.0"
)

app.include_router(rankings_router, prefix="/api")
app.include_router(challenges_router, prefix="/api")


@app.get("/api/status")
async def api_status(service: RankingService = Depends(get_ranking_service)):
    """Status do servidor e do cache do ranking"""
    age = service.cache.age
    return {
        "status": "ok",
        "class_order": ranking_config.class_order,
        "cache_ttl_seconds": service.cache.ttl_seconds,
        "cache_age_seconds": round(age, 3) if age is not None else None,
    }


# ==================== Execução ====================

if __name__ == "__main__":
    import uvicorn

    logger.info(f"STC Play API em {server_config.host}:{server_config.port}")
    uvicorn.run(
        "app.server:app",
        host=server_config.host,
        port=server_config.port,
        reload=server_config.reload,
        log_level="info"
    )
