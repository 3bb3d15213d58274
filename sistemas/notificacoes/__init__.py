# sistemas/notificacoes/__init__.py
"""
Notificações internas para usuários do portal.
"""
