# users/services.py
"""
Consultas de usuários usadas por outros módulos (destinatários de notificações).

Usuários desativados continuam recebendo notificações: perdem o acesso ao
portal, mas encontram o histórico completo se forem reativados.
"""

from typing import List

from sqlalchemy.orm import Session

from auth.models import User, PAPEL_ADMIN, PAPEL_CLIENTE


def listar_ids_por_papel(db: Session, papel: str) -> List[str]:
    """IDs de todos os usuários com o papel informado."""
    rows = db.query(User.id).filter(User.role == papel).all()
    return [row.id for row in rows]


def listar_ids_administradores(db: Session) -> List[str]:
    return listar_ids_por_papel(db, PAPEL_ADMIN)


def listar_ids_clientes_da_empresa(db: Session, empresa_id: str) -> List[str]:
    rows = db.query(User.id).filter(
        User.role == PAPEL_CLIENTE,
        User.empresa_id == empresa_id
    ).all()
    return [row.id for row in rows]
