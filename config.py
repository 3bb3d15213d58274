# config.py
# -*- coding: utf-8 -*-
"""
Configurações centralizadas do Portal Contábil
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Carrega variáveis de ambiente (apenas se existir .env)
load_dotenv()

# ==================================================
# AMBIENTE
# ==================================================
ENV = os.getenv("ENV", "development").lower()
IS_PRODUCTION = ENV == "production"

# ==================================================
# CONFIGURAÇÕES DO BANCO DE DADOS
# ==================================================
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./portal.db")

# Alguns provedores usam postgres:// mas SQLAlchemy precisa de postgresql://
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

# ==================================================
# CONFIGURAÇÕES DE AUTENTICAÇÃO JWT
# ==================================================
# ATENÇÃO: Em produção, SEMPRE defina SECRET_KEY via variável de ambiente
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings
    warnings.warn("SECRET_KEY não definida! Usando chave temporária. DEFINA EM PRODUÇÃO!", RuntimeWarning)
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"

ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "480"))  # 8 horas

# Credenciais do admin inicial (DEVEM ser definidas via variáveis de ambiente em produção)
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")
if not ADMIN_PASSWORD:
    import warnings
    warnings.warn("ADMIN_PASSWORD não definida! Usando senha padrão insegura.", RuntimeWarning)
    ADMIN_PASSWORD = "admin"

DEFAULT_USER_PASSWORD = os.getenv("DEFAULT_USER_PASSWORD", "mudar123")  # Senha padrão para novos usuários

# ==================================================
# ROTINAS MENSAIS
# ==================================================
# Geração periódica para capturar a virada de competência
ROTINAS_AGENDADOR_HABILITADO = os.getenv("ROTINAS_AGENDADOR_HABILITADO", "true").lower() == "true"
ROTINAS_INTERVALO_SEGUNDOS = int(os.getenv("ROTINAS_INTERVALO_SEGUNDOS", "3600"))

# ==================================================
# OUTRAS CONFIGURAÇÕES
# ==================================================
BASE_DIR = Path(__file__).resolve().parent
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
