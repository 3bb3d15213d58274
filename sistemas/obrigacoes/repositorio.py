# sistemas/obrigacoes/repositorio.py
"""
Acesso a dados de obrigações e rotinas mensais.

A inserção de rotina usa INSERT ... ON CONFLICT DO NOTHING sobre a
constraint (empresa_id, obrigacao_id, competencia): chamadas concorrentes
para a mesma tripla resultam em uma única linha, e a perdedora apenas
recebe inserida=False.
"""

from datetime import date
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from database.connection import gerar_uuid
from utils.timezone import now_utc

from .exceptions import DialetoNaoSuportadoError
from .models import Obrigacao, RotinaMensal, StatusRotina

COLUNAS_UNICIDADE_ROTINA = ["empresa_id", "obrigacao_id", "competencia"]

_INSERTS_POR_DIALETO = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def buscar_obrigacoes_por_id_ou_nome(
    db: Session,
    ids: Iterable[str],
    nomes: Iterable[str]
) -> List[Obrigacao]:
    """
    Obrigações cujo id está em `ids` OU cujo nome está em `nomes`,
    em uma única consulta. Critério vazio não entra no filtro.
    """
    ids = list(ids)
    nomes = list(nomes)

    criterios = []
    if ids:
        criterios.append(Obrigacao.id.in_(ids))
    if nomes:
        criterios.append(Obrigacao.nome.in_(nomes))
    if not criterios:
        return []

    return db.query(Obrigacao).filter(or_(*criterios)).order_by(Obrigacao.nome).all()


def inserir_rotina_se_ausente(
    db: Session,
    empresa_id: str,
    obrigacao_id: str,
    nome_obrigacao: Optional[str],
    departamento: Optional[str],
    competencia: str,
    prazo: date
) -> Optional[str]:
    """
    Insere a rotina se a tripla (empresa, obrigação, competência) ainda não
    existe. Não faz commit.

    Returns:
        ID da rotina criada, ou None se já existia.

    Raises:
        DialetoNaoSuportadoError: banco diferente de PostgreSQL e SQLite
    """
    dialeto = db.get_bind().dialect.name
    insert = _INSERTS_POR_DIALETO.get(dialeto)
    if insert is None:
        raise DialetoNaoSuportadoError(f"Dialeto sem suporte a ON CONFLICT: {dialeto}")

    rotina_id = gerar_uuid()
    agora = now_utc()
    stmt = insert(RotinaMensal).values(
        id=rotina_id,
        empresa_id=empresa_id,
        obrigacao_id=obrigacao_id,
        nome_obrigacao=nome_obrigacao,
        departamento=departamento,
        competencia=competencia,
        prazo=prazo,
        status=StatusRotina.PENDENTE.value,
        criado_em=agora,
        atualizado_em=agora,
    ).on_conflict_do_nothing(index_elements=COLUNAS_UNICIDADE_ROTINA)

    result = db.execute(stmt)
    return rotina_id if result.rowcount and result.rowcount > 0 else None


def listar_rotinas(
    db: Session,
    empresa_id: Optional[str] = None,
    competencia: Optional[str] = None,
    status: Optional[str] = None
) -> List[RotinaMensal]:
    query = db.query(RotinaMensal)
    if empresa_id:
        query = query.filter(RotinaMensal.empresa_id == empresa_id)
    if competencia:
        query = query.filter(RotinaMensal.competencia == competencia)
    if status:
        query = query.filter(RotinaMensal.status == status)
    return query.order_by(RotinaMensal.competencia.desc(), RotinaMensal.prazo).all()
