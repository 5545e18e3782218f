"""
Acesso ao Supabase
"""
