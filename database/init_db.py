# database/init_db.py
"""
Inicialização do banco de dados e seed do usuário admin
"""

import time
from sqlalchemy.exc import OperationalError
from sqlalchemy import text
from database.connection import engine, Base, SessionLocal
from auth.models import User, PAPEL_ADMIN
from auth.security import get_password_hash
from config import ADMIN_USERNAME, ADMIN_PASSWORD
from utils.logging_config import get_logger

# Importa modelos para criar tabelas
from sistemas.empresas.models import Empresa  # noqa: F401
from sistemas.obrigacoes.models import Obrigacao, RotinaMensal  # noqa: F401
from sistemas.notificacoes.models import Notificacao  # noqa: F401

logger = get_logger(__name__)


def wait_for_db(max_retries=10, delay=3):
    """Aguarda o banco de dados ficar disponível"""
    for attempt in range(max_retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Conexão com banco de dados estabelecida")
            return True
        except OperationalError:
            if attempt < max_retries - 1:
                logger.warning(
                    "Aguardando banco de dados",
                    tentativa=attempt + 1,
                    max_tentativas=max_retries,
                )
                time.sleep(delay)
            else:
                logger.error("Banco de dados indisponível", tentativas=max_retries)
                raise
    return False


def create_tables(bind=None):
    """Cria todas as tabelas no banco de dados"""
    Base.metadata.create_all(bind=bind or engine)
    logger.info("Tabelas criadas")


def seed_admin(session_factory=None):
    """Cria o usuário administrador inicial se não existir"""
    db = (session_factory or SessionLocal)()
    try:
        existing_admin = db.query(User).filter(User.username == ADMIN_USERNAME).first()

        if not existing_admin:
            admin = User(
                username=ADMIN_USERNAME,
                full_name="Administrador",
                email=None,
                hashed_password=get_password_hash(ADMIN_PASSWORD),
                role=PAPEL_ADMIN,
                must_change_password=True,
                is_active=True
            )
            db.add(admin)
            db.commit()
            logger.info("Usuário admin criado", username=ADMIN_USERNAME)
        else:
            logger.info("Usuário admin já existe", username=ADMIN_USERNAME)
    finally:
        db.close()


def init_database():
    """Inicializa o banco de dados completo"""
    logger.info("Inicializando banco de dados")
    wait_for_db()
    create_tables()
    seed_admin()
    logger.info("Banco de dados inicializado")


if __name__ == "__main__":
    init_database()
