"""
Challenges Module

Fluxo de desafios do ranking
- validação (posição + cota mensal)
- criar, aceitar, recusar, cancelar
"""

from .service import ChallengeService, ChallengeResult

__all__ = ["ChallengeService", "ChallengeResult"]
