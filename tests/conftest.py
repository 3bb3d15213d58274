# tests/conftest.py
"""
Configuração global do pytest para o Portal Contábil.

O pytest carrega conftest.py antes de importar os módulos de teste.
"""

import sys
import os

# Adiciona o diretório raiz do projeto ao PYTHONPATH
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Configura variáveis de ambiente para testes
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("ROTINAS_AGENDADOR_HABILITADO", "false")


import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database.connection import Base
# Registra todos os modelos no metadata
import database.init_db  # noqa: F401,E402


@pytest.fixture
def engine():
    """Banco SQLite em memória compartilhado entre sessões do mesmo teste."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()
