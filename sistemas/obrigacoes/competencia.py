# sistemas/obrigacoes/competencia.py
"""
Funções puras de competência e vencimento.

A tabela de vencimentos de uma obrigação é editada livremente pela equipe,
então os valores chegam em formatos variados: "20", "20ª", 15, "Não há",
"Nao tem". Toda a interpretação desses valores fica concentrada aqui.
"""

import re
import unicodedata
from datetime import date, timedelta
from typing import Any, Optional

# Marcador de "não se aplica neste mês", comparado sem acento e sem caixa
MARCADOR_NAO_APLICAVEL = "nao"

DIA_MINIMO = 1
DIA_MAXIMO = 31

_RE_DIA_INICIAL = re.compile(r"^(\d+)")
_RE_UUID = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE
)


def _sem_acentos(texto: str) -> str:
    normalizado = unicodedata.normalize("NFKD", texto)
    return "".join(c for c in normalizado if not unicodedata.combining(c))


def parse_due_day(valor: Any) -> Optional[int]:
    """
    Interpreta o dia de vencimento.

    Lê os dígitos iniciais e descarta o sufixo ("20ª" -> 20). Retorna None
    quando não há dígitos no início ou quando o dia está fora de 1..31.
    Nunca lança exceção.

    Examples:
        >>> parse_due_day("20ª")
        20
        >>> parse_due_day(15)
        15
        >>> parse_due_day("abc") is None
        True
    """
    if valor is None or isinstance(valor, bool):
        return None

    match = _RE_DIA_INICIAL.match(str(valor).strip())
    if not match:
        return None

    dia = int(match.group(1))
    if dia < DIA_MINIMO or dia > DIA_MAXIMO:
        return None
    return dia


def nao_aplicavel(valor: Any) -> bool:
    """
    True quando o mês não gera rotina: valor ausente/vazio ou contendo o
    marcador "não" ("Não há", "Nao tem", "NÃO").
    """
    if valor is None:
        return True
    texto = str(valor).strip()
    if not texto:
        return True
    return MARCADOR_NAO_APLICAVEL in _sem_acentos(texto).lower()


def competence_key(data: date) -> str:
    """Chave de competência no formato YYYY-MM (fevereiro/2024 -> "2024-02")."""
    return f"{data.year:04d}-{data.month:02d}"


def chave_mes(data: date) -> str:
    """Chave do mês na tabela de vencimentos: número sem zero à esquerda."""
    return str(data.month)


def calcular_prazo(ano: int, mes: int, dia: int) -> date:
    """
    Data de vencimento da competência.

    Um dia maior que o tamanho do mês avança para o mês seguinte
    (dia 31 em abril -> 1º de maio).
    """
    return date(ano, mes, 1) + timedelta(days=dia - 1)


def eh_uuid(valor: Any) -> bool:
    """True para UUIDs na forma canônica 8-4-4-4-12."""
    return isinstance(valor, str) and bool(_RE_UUID.match(valor.strip()))
