"""
Rankings Module

Ranking Geral, ranking por classe e adversários elegíveis
"""
