"""
STC Play - API HTTP do ranking e dos desafios
"""
