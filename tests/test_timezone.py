#!/usr/bin/env python
"""
Testes para validar a política de timezone do sistema.

Política:
- Backend grava em UTC (timezone-aware)
- Competência e prazos seguem o calendário de America/Sao_Paulo

Uso:
    pytest tests/test_timezone.py -v
"""

import pytest
from datetime import date, datetime, timezone
from unittest.mock import patch


class TestTimezoneModule:
    """Testes do módulo utils/timezone.py"""

    def test_now_utc_returns_timezone_aware(self):
        """now_utc() deve retornar datetime com timezone UTC."""
        from utils.timezone import now_utc

        result = now_utc()

        assert result.tzinfo is not None, "Deve ser timezone-aware"
        assert result.tzinfo == timezone.utc, "Deve ser UTC"

    def test_now_local_returns_timezone_aware(self):
        """now_local() deve retornar datetime com timezone local."""
        from utils.timezone import now_local, TIMEZONE_LOCAL_NAME

        result = now_local()

        assert result.tzinfo is not None, "Deve ser timezone-aware"
        # pytz timezones têm representações diferentes, comparamos pelo nome
        assert TIMEZONE_LOCAL_NAME in str(result.tzinfo), "Deve ser timezone local"

    def test_today_local_follows_local_calendar(self):
        """Às 01h UTC de 01/02, em São Paulo ainda é 31/01."""
        from utils import timezone as tz_module

        instante_utc = datetime(2026, 2, 1, 1, 0, tzinfo=timezone.utc)
        with patch.object(tz_module, "now_local", return_value=instante_utc.astimezone(tz_module.TIMEZONE_LOCAL)):
            assert tz_module.today_local() == date(2026, 1, 31)

    def test_get_utc_now_for_sqlalchemy(self):
        """get_utc_now() deve ser callable e retornar UTC."""
        from utils.timezone import get_utc_now

        result = get_utc_now()
        assert result.tzinfo == timezone.utc


class TestTimezoneConstants:

    def test_timezone_local_name(self):
        from utils.timezone import TIMEZONE_LOCAL_NAME

        assert TIMEZONE_LOCAL_NAME == "America/Sao_Paulo"


class TestModelsUseCorrectTimezone:
    """Modelos devem usar get_utc_now como default."""

    def test_user_model_uses_get_utc_now(self):
        from auth.models import User

        created_at_col = User.__table__.columns["created_at"]
        assert created_at_col.default is not None, "created_at deve ter default"

    def test_rotina_model_uses_get_utc_now(self):
        from sistemas.obrigacoes.models import RotinaMensal

        assert RotinaMensal.__table__.columns["criado_em"].default is not None


class TestJWTTimezone:
    """Testes para verificar que JWT usa timezone correto."""

    def test_create_access_token_uses_utc(self):
        """create_access_token deve usar UTC para expiração."""
        from auth.security import create_access_token
        from jose import jwt
        from config import SECRET_KEY, ALGORITHM

        token = create_access_token({"sub": "testuser"})
        decoded = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])

        exp = decoded.get("exp")
        assert exp is not None, "Token deve ter exp"
        assert exp > datetime.now(timezone.utc).timestamp()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
