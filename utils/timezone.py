"""
POLÍTICA GLOBAL DE TIMEZONE DO SISTEMA

REGRAS:
1. GRAVAÇÃO NO BANCO: Sempre UTC (timezone-aware)
2. COMPETÊNCIA E PRAZOS: Sempre pela data local do escritório (America/Sao_Paulo)
3. SERIALIZAÇÃO JSON: ISO 8601 com timezone explícito

USO:
    from utils.timezone import now_utc, today_local

    # Para gravar no banco (UTC)
    criado_em = now_utc()

    # Para decidir a competência corrente
    hoje = today_local()

IMPORTANTE:
- Nunca use datetime.utcnow() ou datetime.now() diretamente
- A virada de mês segue o relógio local: às 22h de 31/01 em São Paulo
  a competência ainda é janeiro, embora em UTC já seja fevereiro
"""

from datetime import date, datetime, timezone
import pytz

# Timezone local do escritório
TIMEZONE_LOCAL_NAME = "America/Sao_Paulo"
TIMEZONE_LOCAL = pytz.timezone(TIMEZONE_LOCAL_NAME)

UTC = timezone.utc


def now_utc() -> datetime:
    """
    Retorna o datetime atual em UTC com timezone-aware.

    USE ESTA FUNÇÃO para gravar timestamps no banco de dados.
    """
    return datetime.now(UTC)


def now_local() -> datetime:
    """Retorna o datetime atual no timezone local (America/Sao_Paulo)."""
    return datetime.now(TIMEZONE_LOCAL)


def today_local() -> date:
    """Data de hoje no calendário local. Base do cálculo de competência."""
    return now_local().date()


def get_utc_now():
    """
    Função callable para uso em Column(default=...).

    USE EM MODELS:
        from utils.timezone import get_utc_now
        criado_em = Column(DateTime(timezone=True), default=get_utc_now)
    """
    return now_utc()
