# sistemas/obrigacoes/services.py
"""
Geração de rotinas mensais a partir das obrigações atribuídas à empresa.

Fluxo:
1. materializar_rotinas() grava as rotinas da competência corrente e
   devolve a lista de ações pós-commit (notificações)
2. quem chamou executa as ações depois que as gravações foram confirmadas

garantir_rotinas_mensais() junta os dois passos com sessão própria e é o
ponto de entrada usado pelo cadastro de empresas, pelo agendador e pela
geração manual. É manutenção em segundo plano: nunca propaga erro.

Autor: Portal Contábil
"""

from dataclasses import dataclass, field
from datetime import date
from functools import partial
from typing import Callable, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from database.connection import SessionLocal
from sistemas.empresas.models import Empresa
from sistemas.notificacoes.services import notificar_usuarios
from users.services import listar_ids_administradores, listar_ids_clientes_da_empresa
from utils.logging_config import get_logger
from utils.timezone import today_local

from . import repositorio
from .competencia import (
    calcular_prazo,
    chave_mes,
    competence_key,
    eh_uuid,
    nao_aplicavel,
    parse_due_day,
)
from .exceptions import RotinaNaoEncontradaError, RotinasError, StatusInvalidoError
from .models import RotinaMensal, StatusRotina

logger = get_logger(__name__)

TITULO_NOVA_ROTINA = "Nova obrigação mensal"
TITULO_STATUS_ATUALIZADO = "Status de obrigação atualizado"


# ============================================
# Resultado da geração
# ============================================

@dataclass
class RotinaCriada:
    id: str
    obrigacao_id: str
    nome_obrigacao: str
    competencia: str
    prazo: date


@dataclass
class ResultadoMaterializacao:
    """Resultado de uma execução de materializar_rotinas()"""
    competencia: Optional[str] = None
    criadas: List[RotinaCriada] = field(default_factory=list)
    ignoradas: List[str] = field(default_factory=list)
    falhas: List[str] = field(default_factory=list)
    pos_commit: List[Callable[[], None]] = field(default_factory=list)

    def executar_pos_commit(self) -> None:
        """Executa as ações pós-commit; falha de uma não impede as demais."""
        for acao in self.pos_commit:
            try:
                acao()
            except Exception:
                logger.exception("Falha em ação pós-commit", competencia=self.competencia)
        self.pos_commit = []


@dataclass(frozen=True)
class _ObrigacaoCandidata:
    id: str
    nome: str
    departamento: Optional[str]
    vencimento: object


# ============================================
# Geração
# ============================================

def _normalizar_referencias(referencias: Optional[Iterable]) -> List[str]:
    vistas = []
    for ref in referencias or []:
        if ref is None:
            continue
        texto = str(ref).strip()
        if texto and texto not in vistas:
            vistas.append(texto)
    return vistas


def _notificar_administradores(db: Session, nome_obrigacao: str, competencia: str) -> None:
    notificar_usuarios(
        db,
        listar_ids_administradores(db),
        TITULO_NOVA_ROTINA,
        f"Obrigação {nome_obrigacao} gerada para a competência {competencia}.",
    )


def materializar_rotinas(
    db: Session,
    empresa_id: str,
    referencias: Optional[Iterable],
    hoje: Optional[date] = None
) -> ResultadoMaterializacao:
    """
    Cria as rotinas da competência corrente para a empresa.

    Args:
        db: Sessão SQLAlchemy
        empresa_id: Empresa dona das rotinas
        referencias: IDs e/ou nomes de obrigações do catálogo
        hoje: Data de referência (padrão: hoje no fuso local)

    Returns:
        ResultadoMaterializacao com as rotinas criadas e as notificações
        pendentes em `pos_commit` (ainda não executadas).
    """
    resultado = ResultadoMaterializacao()
    refs = _normalizar_referencias(referencias)
    if not empresa_id or not refs:
        return resultado

    hoje = hoje or today_local()
    competencia = competence_key(hoje)
    mes = chave_mes(hoje)
    resultado.competencia = competencia

    # ids são gravados em minúsculas
    ids = [r.lower() for r in refs if eh_uuid(r)]
    nomes = [r for r in refs if not eh_uuid(r)]

    try:
        candidatas = [
            _ObrigacaoCandidata(
                id=o.id,
                nome=o.nome,
                departamento=o.departamento,
                vencimento=(o.vencimentos_mensais or {}).get(mes)
                if isinstance(o.vencimentos_mensais, dict) else None,
            )
            for o in repositorio.buscar_obrigacoes_por_id_ou_nome(db, ids, nomes)
        ]
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning("Falha ao buscar obrigações", empresa_id=empresa_id, erro=str(e))
        return resultado

    for obrigacao in candidatas:
        if nao_aplicavel(obrigacao.vencimento):
            resultado.ignoradas.append(obrigacao.id)
            continue

        dia = parse_due_day(obrigacao.vencimento)
        if dia is None:
            logger.debug(
                "Vencimento inválido ignorado",
                obrigacao_id=obrigacao.id,
                vencimento=str(obrigacao.vencimento),
            )
            resultado.ignoradas.append(obrigacao.id)
            continue

        prazo = calcular_prazo(hoje.year, hoje.month, dia)

        try:
            rotina_id = repositorio.inserir_rotina_se_ausente(
                db,
                empresa_id=empresa_id,
                obrigacao_id=obrigacao.id,
                nome_obrigacao=obrigacao.nome,
                departamento=obrigacao.departamento,
                competencia=competencia,
                prazo=prazo,
            )
            db.commit()
        except (SQLAlchemyError, RotinasError) as e:
            db.rollback()
            resultado.falhas.append(obrigacao.id)
            logger.warning(
                "Falha ao gravar rotina mensal",
                empresa_id=empresa_id,
                obrigacao_id=obrigacao.id,
                competencia=competencia,
                erro=str(e),
            )
            continue

        if rotina_id is None:
            resultado.ignoradas.append(obrigacao.id)
            continue

        resultado.criadas.append(RotinaCriada(
            id=rotina_id,
            obrigacao_id=obrigacao.id,
            nome_obrigacao=obrigacao.nome,
            competencia=competencia,
            prazo=prazo,
        ))
        resultado.pos_commit.append(
            partial(_notificar_administradores, db, obrigacao.nome, competencia)
        )

    if resultado.criadas:
        logger.info(
            "Rotinas mensais geradas",
            empresa_id=empresa_id,
            competencia=competencia,
            criadas=len(resultado.criadas),
        )

    return resultado


def garantir_rotinas_mensais(
    empresa_id: str,
    referencias: Optional[Iterable],
    session_factory: Optional[sessionmaker] = None,
    hoje: Optional[date] = None
) -> ResultadoMaterializacao:
    """
    Ponto de entrada da geração: sessão própria, gravação e notificações.

    Chamado sempre que as obrigações de uma empresa mudam e periodicamente
    pelo agendador. Idempotente dentro da mesma competência.
    """
    if not empresa_id or not _normalizar_referencias(referencias):
        return ResultadoMaterializacao()

    db = None
    try:
        db = (session_factory or SessionLocal)()
        resultado = materializar_rotinas(db, empresa_id, referencias, hoje=hoje)
        resultado.executar_pos_commit()
        return resultado
    except (SQLAlchemyError, RotinasError) as e:
        logger.warning("Banco indisponível para gerar rotinas", empresa_id=empresa_id, erro=str(e))
        return ResultadoMaterializacao()
    finally:
        if db is not None:
            db.close()


# ============================================
# Status da rotina
# ============================================

def atualizar_status_rotina(db: Session, rotina_id: str, status: str) -> RotinaMensal:
    """
    Atualiza o status e avisa os clientes da empresa e os administradores.

    Raises:
        StatusInvalidoError: status fora de StatusRotina
        RotinaNaoEncontradaError: rotina inexistente
    """
    try:
        novo_status = StatusRotina(status)
    except ValueError:
        aceitos = ", ".join(s.value for s in StatusRotina)
        raise StatusInvalidoError(f"Status inválido: '{status}'. Aceitos: {aceitos}")

    rotina = db.query(RotinaMensal).filter(RotinaMensal.id == rotina_id).first()
    if not rotina:
        raise RotinaNaoEncontradaError(f"Rotina {rotina_id} não encontrada")

    rotina.status = novo_status.value
    db.commit()
    db.refresh(rotina)

    empresa = db.query(Empresa).filter(Empresa.id == rotina.empresa_id).first()
    nome_empresa = empresa.nome if empresa else "Empresa"
    destinatarios = (
        listar_ids_clientes_da_empresa(db, rotina.empresa_id)
        + listar_ids_administradores(db)
    )
    notificar_usuarios(
        db,
        destinatarios,
        TITULO_STATUS_ATUALIZADO,
        f"Obrigação {rotina.nome_obrigacao} ({nome_empresa}) - {rotina.competencia}: {novo_status.value}.",
    )

    logger.info(
        "Status de rotina atualizado",
        rotina_id=rotina_id,
        status=novo_status.value,
    )
    return rotina
