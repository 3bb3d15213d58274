# tests/test_rate_limit.py
# -*- coding: utf-8 -*-
"""
Testes para o módulo de Rate Limiting (utils/rate_limit.py)

Testa:
- Detecção de IP real atrás de proxies
- Identificação de usuário
- Handler de rate limit excedido
- Configuração dos limites
"""

import asyncio
import json
from unittest.mock import Mock, patch

import pytest
from fastapi import Request

from utils.rate_limit import (
    get_real_ip,
    get_user_identifier,
    rate_limit_exceeded_handler,
    RATE_LIMIT_LOGIN,
    RATE_LIMIT_ROTINAS,
    LIMITS,
)


# ==================================================
# FIXTURES
# ==================================================


@pytest.fixture
def mock_request():
    """Cria um mock de Request básico."""
    request = Mock(spec=Request)
    request.headers = {}
    request.url.path = "/test"
    return request


@pytest.fixture
def mock_request_with_token():
    """Cria um mock de Request com Bearer token."""
    request = Mock(spec=Request)
    request.headers = {"Authorization": "Bearer test-token"}
    request.url.path = "/rotinas-mensais/gerar"
    return request


# ==================================================
# TESTES: get_real_ip
# ==================================================


class TestGetRealIP:

    def test_get_real_ip_from_x_forwarded_for(self):
        request = Mock(spec=Request)
        request.headers = {"X-Forwarded-For": "192.168.1.100, 10.0.0.1"}
        assert get_real_ip(request) == "192.168.1.100"

    def test_get_real_ip_from_x_real_ip(self):
        request = Mock(spec=Request)
        request.headers = {"X-Real-IP": "203.0.113.42"}
        assert get_real_ip(request) == "203.0.113.42"

    def test_get_real_ip_fallback_direct(self, mock_request):
        with patch("utils.rate_limit.get_remote_address", return_value="127.0.0.1"):
            assert get_real_ip(mock_request) == "127.0.0.1"

    def test_get_real_ip_strips_whitespace(self):
        request = Mock(spec=Request)
        request.headers = {"X-Forwarded-For": "  10.1.1.1  , 10.0.0.1"}
        assert get_real_ip(request) == "10.1.1.1"


# ==================================================
# TESTES: get_user_identifier
# ==================================================


class TestGetUserIdentifier:

    def test_fallback_to_ip(self, mock_request):
        with patch("utils.rate_limit.get_real_ip", return_value="192.168.1.100"):
            assert get_user_identifier(mock_request) == "ip:192.168.1.100"

    def test_invalid_token_falls_back_to_ip(self, mock_request_with_token):
        with patch("utils.rate_limit.get_real_ip", return_value="192.168.1.100"):
            with patch("auth.security.decode_token", return_value=None):
                assert get_user_identifier(mock_request_with_token) == "ip:192.168.1.100"

    def test_valid_token_uses_user_id(self, mock_request_with_token):
        with patch("auth.security.decode_token", return_value={"user_id": "user123"}):
            assert get_user_identifier(mock_request_with_token) == "user:user123"

    def test_token_without_user_id(self, mock_request_with_token):
        with patch("utils.rate_limit.get_real_ip", return_value="192.168.1.100"):
            with patch("auth.security.decode_token", return_value={"other": "data"}):
                assert get_user_identifier(mock_request_with_token) == "ip:192.168.1.100"


# ==================================================
# TESTES: rate_limit_exceeded_handler
# ==================================================


class TestRateLimitExceededHandler:

    def test_handler_returns_429(self, mock_request):
        exc = Exception("10 per 1 minute")
        exc.detail = "10 per 1 minute"

        response = asyncio.run(rate_limit_exceeded_handler(mock_request, exc))

        assert response.status_code == 429
        assert "rate_limit_exceeded" in response.body.decode()

    def test_handler_without_detail(self, mock_request):
        response = asyncio.run(rate_limit_exceeded_handler(mock_request, ValueError("x")))
        assert response.status_code == 429

    def test_handler_headers(self, mock_request):
        response = asyncio.run(rate_limit_exceeded_handler(mock_request, Exception("5 per 1 minute")))
        assert response.headers["Retry-After"] == "60"

    def test_handler_json_structure(self, mock_request):
        response = asyncio.run(rate_limit_exceeded_handler(mock_request, Exception("limite")))

        body = json.loads(response.body.decode())
        assert body["error"] == "rate_limit_exceeded"
        assert "detail" in body
        assert body["retry_after"] == "60"


# ==================================================
# TESTES: Configuração
# ==================================================


class TestRateLimitConfiguration:

    def test_limits_dict_has_all_keys(self):
        assert set(LIMITS) == {"login", "rotinas", "default"}

    def test_limits_match_env_values(self):
        assert LIMITS["login"] == RATE_LIMIT_LOGIN
        assert LIMITS["rotinas"] == RATE_LIMIT_ROTINAS

    def test_limit_strings_not_empty(self):
        for valor in LIMITS.values():
            assert "/" in valor
