# sistemas/obrigacoes/agendador.py
"""
Agendador da geração periódica de rotinas mensais.

A geração já acontece sempre que as obrigações de uma empresa são salvas;
o agendador cobre a virada de competência, quando nada foi editado mas o
mês mudou.

Uso:
    agendador = AgendadorRotinas(SessionLocal)

    # Ciclo único
    resumo = agendador.executar_ciclo()

    # Loop contínuo (background)
    await agendador.iniciar()
"""

import asyncio
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from config import ROTINAS_INTERVALO_SEGUNDOS
from database.connection import SessionLocal
from sistemas.empresas.models import Empresa
from utils.logging_config import get_logger
from utils.timezone import today_local

from .competencia import competence_key
from .services import garantir_rotinas_mensais

logger = get_logger(__name__)


class AgendadorRotinas:
    """Executa a geração de rotinas para todas as empresas ativas."""

    def __init__(
        self,
        session_factory: Optional[sessionmaker] = None,
        intervalo_segundos: int = ROTINAS_INTERVALO_SEGUNDOS
    ):
        self.session_factory = session_factory or SessionLocal
        self.intervalo_segundos = intervalo_segundos
        self._rodando = False

    @property
    def rodando(self) -> bool:
        return self._rodando

    def _empresas_com_obrigacoes(self, empresa_id: Optional[str] = None) -> List[Tuple[str, list]]:
        db = self.session_factory()
        try:
            query = db.query(Empresa.id, Empresa.obrigacoes).filter(Empresa.ativa.is_(True))
            if empresa_id:
                query = query.filter(Empresa.id == empresa_id)
            return [(row.id, row.obrigacoes) for row in query.all() if row.obrigacoes]
        finally:
            db.close()

    def executar_ciclo(
        self,
        hoje: Optional[date] = None,
        empresa_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Gera as rotinas da competência corrente.

        Args:
            hoje: Data de referência (padrão: hoje no fuso local)
            empresa_id: Restringe o ciclo a uma empresa

        Returns:
            Resumo com competência, empresas processadas e rotinas criadas
        """
        hoje = hoje or today_local()
        resumo = {
            "competencia": competence_key(hoje),
            "empresas": 0,
            "rotinas_criadas": 0,
        }

        try:
            empresas = self._empresas_com_obrigacoes(empresa_id)
        except SQLAlchemyError as e:
            logger.warning("Banco indisponível para o ciclo de rotinas", erro=str(e))
            return resumo

        for id_empresa, obrigacoes in empresas:
            resultado = garantir_rotinas_mensais(
                id_empresa,
                obrigacoes,
                session_factory=self.session_factory,
                hoje=hoje,
            )
            resumo["empresas"] += 1
            resumo["rotinas_criadas"] += len(resultado.criadas)

        logger.info("Ciclo de rotinas concluído", **resumo)
        return resumo

    async def iniciar(self):
        """
        Loop contínuo: executa um ciclo a cada `intervalo_segundos`.
        """
        self._rodando = True
        logger.info("Agendador de rotinas iniciado", intervalo_segundos=self.intervalo_segundos)

        loop = asyncio.get_running_loop()
        while self._rodando:
            try:
                await loop.run_in_executor(None, self.executar_ciclo)
            except Exception:
                logger.exception("Erro durante ciclo de rotinas")

            await asyncio.sleep(self.intervalo_segundos)

    def parar(self):
        """Para o loop do agendador."""
        self._rodando = False
        logger.info("Agendador de rotinas parado")
