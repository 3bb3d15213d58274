# tests/test_routers.py
"""
Testes de integração das rotas HTTP (empresas, obrigações, rotinas e
notificações) com banco SQLite em memória.

Execução:
    pytest tests/test_routers.py -v
"""

import asyncio
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from auth.models import User
from auth.security import create_user_token, get_password_hash
from database.connection import get_db, get_session_factory
from main import app
from sistemas.empresas.models import Empresa
from sistemas.notificacoes.models import Notificacao
from sistemas.obrigacoes.agendador import AgendadorRotinas
from sistemas.obrigacoes.models import Obrigacao, RotinaMensal
from sistemas.obrigacoes.competencia import competence_key
from sistemas.obrigacoes.services import TITULO_STATUS_ATUALIZADO
from utils.timezone import today_local

TODOS_OS_MESES = {str(mes): "20" for mes in range(1, 13)}


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db):
    user = User(
        username="admin",
        full_name="Administrador",
        hashed_password=get_password_hash("senha-admin"),
        role="admin",
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def empresa(db):
    empresa = Empresa(nome="Padaria Central", cnpj="12345678000199")
    db.add(empresa)
    db.commit()
    return empresa


@pytest.fixture
def cliente(db, empresa):
    user = User(
        username="cliente",
        full_name="Cliente",
        hashed_password="x",
        role="cliente",
        empresa_id=empresa.id,
    )
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def obrigacao(db):
    obrigacao = Obrigacao(nome="DAS", departamento="Fiscal", vencimentos_mensais=TODOS_OS_MESES)
    db.add(obrigacao)
    db.commit()
    return obrigacao


def _auth(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


# ==================================================
# Autenticação
# ==================================================

class TestAuth:

    def test_login_retorna_token(self, client, admin):
        response = client.post("/auth/login", data={"username": "admin", "password": "senha-admin"})

        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

    def test_login_senha_errada(self, client, admin):
        response = client.post("/auth/login", data={"username": "admin", "password": "errada"})
        assert response.status_code == 401

    def test_me(self, client, cliente, empresa):
        response = client.get("/auth/me", headers=_auth(cliente))

        assert response.status_code == 200
        assert response.json()["empresa_id"] == empresa.id

    def test_sem_token(self, client):
        assert client.get("/empresas").status_code == 401


# ==================================================
# Empresas
# ==================================================

class TestEmpresas:

    def test_criar_empresa_gera_rotinas_em_background(self, client, admin, obrigacao, db):
        response = client.post(
            "/empresas",
            json={"razao_social": "Mercado Bom LTDA", "obrigacoes": [obrigacao.id]},
            headers=_auth(admin),
        )

        assert response.status_code == 200
        dados = response.json()
        assert dados["nome"] == "Mercado Bom LTDA"

        rotinas = db.query(RotinaMensal).filter(RotinaMensal.empresa_id == dados["id"]).all()
        assert len(rotinas) == 1
        assert rotinas[0].competencia == competence_key(today_local())
        assert db.query(Notificacao).filter(Notificacao.usuario_id == admin.id).count() == 1

    def test_salvar_novamente_nao_duplica(self, client, admin, obrigacao, db):
        payload = {"nome": "Mercado", "obrigacoes": ["DAS"]}
        criada = client.post("/empresas", json=payload, headers=_auth(admin)).json()
        client.post("/empresas", json={**payload, "id": criada["id"]}, headers=_auth(admin))

        assert db.query(RotinaMensal).count() == 1
        assert db.query(Empresa).count() == 1

    def test_empresa_sem_nome(self, client, admin):
        response = client.post("/empresas", json={"cnpj": "1"}, headers=_auth(admin))
        assert response.status_code == 400

    def test_cnpj_duplicado(self, client, admin, empresa):
        response = client.post(
            "/empresas",
            json={"nome": "Outra", "cnpj": empresa.cnpj},
            headers=_auth(admin),
        )
        assert response.status_code == 400

    def test_cliente_nao_cria_empresa(self, client, cliente):
        response = client.post("/empresas", json={"nome": "X"}, headers=_auth(cliente))
        assert response.status_code == 403

    def test_cliente_lista_apenas_propria_empresa(self, client, cliente, empresa, db):
        db.add(Empresa(nome="Concorrente"))
        db.commit()

        response = client.get("/empresas", headers=_auth(cliente))

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [empresa.id]

    def test_cliente_nao_acessa_outra_empresa(self, client, cliente, db):
        outra = Empresa(nome="Concorrente")
        db.add(outra)
        db.commit()

        assert client.get(f"/empresas/{outra.id}", headers=_auth(cliente)).status_code == 403

    def test_excluir_empresa(self, client, admin, empresa, db):
        response = client.delete(f"/empresas/{empresa.id}", headers=_auth(admin))

        assert response.status_code == 200
        db.expire_all()
        assert db.query(Empresa).count() == 0


# ==================================================
# Catálogo de obrigações
# ==================================================

class TestObrigacoes:

    def test_criar_e_atualizar(self, client, admin):
        criada = client.post(
            "/obrigacoes",
            json={"nome": "FGTS", "vencimentos_mensais": {"01": "7", "2": 7}},
            headers=_auth(admin),
        )
        assert criada.status_code == 200
        dados = criada.json()
        assert dados["vencimentos_mensais"] == {"1": "7", "2": 7}

        atualizada = client.post(
            "/obrigacoes",
            json={"id": dados["id"], "nome": "FGTS Digital"},
            headers=_auth(admin),
        )
        assert atualizada.json()["id"] == dados["id"]
        assert atualizada.json()["nome"] == "FGTS Digital"

    def test_mes_invalido(self, client, admin):
        response = client.post(
            "/obrigacoes",
            json={"nome": "X", "vencimentos_mensais": {"13": "10"}},
            headers=_auth(admin),
        )
        assert response.status_code == 422

    def test_cliente_lista_mas_nao_edita(self, client, cliente, obrigacao):
        assert client.get("/obrigacoes", headers=_auth(cliente)).status_code == 200
        assert client.delete(f"/obrigacoes/{obrigacao.id}", headers=_auth(cliente)).status_code == 403

    def test_obrigacao_inexistente(self, client, admin):
        assert client.get("/obrigacoes/nao-existe", headers=_auth(admin)).status_code == 404


# ==================================================
# Rotinas mensais
# ==================================================

class TestRotinas:

    def _criar_rotina(self, db, empresa, obrigacao):
        rotina = RotinaMensal(
            empresa_id=empresa.id,
            obrigacao_id=obrigacao.id,
            nome_obrigacao=obrigacao.nome,
            competencia="2024-03",
        )
        db.add(rotina)
        db.commit()
        return rotina

    def test_cliente_ve_apenas_propria_empresa(self, client, cliente, empresa, obrigacao, db):
        outra = Empresa(nome="Concorrente")
        db.add(outra)
        db.commit()
        self._criar_rotina(db, empresa, obrigacao)
        self._criar_rotina(db, outra, obrigacao)

        response = client.get(
            "/rotinas-mensais", params={"empresa_id": outra.id}, headers=_auth(cliente)
        )

        assert response.status_code == 200
        dados = response.json()
        assert dados["total"] == 1
        assert dados["rotinas"][0]["empresa_id"] == empresa.id

    def test_filtro_por_status(self, client, admin, empresa, obrigacao, db):
        self._criar_rotina(db, empresa, obrigacao)

        pendentes = client.get("/rotinas-mensais", params={"status": "Pendente"}, headers=_auth(admin))
        concluidas = client.get("/rotinas-mensais", params={"status": "Concluido"}, headers=_auth(admin))

        assert pendentes.json()["total"] == 1
        assert concluidas.json()["total"] == 0

    def test_atualizar_status_notifica(self, client, admin, cliente, empresa, obrigacao, db):
        rotina = self._criar_rotina(db, empresa, obrigacao)

        response = client.put(
            f"/rotinas-mensais/{rotina.id}/status",
            json={"status": "Concluido"},
            headers=_auth(admin),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "Concluido"
        notificacoes = db.query(Notificacao).filter(Notificacao.titulo == TITULO_STATUS_ATUALIZADO).all()
        assert {n.usuario_id for n in notificacoes} == {admin.id, cliente.id}
        assert "Padaria Central" in notificacoes[0].mensagem

    def test_status_invalido(self, client, admin, empresa, obrigacao, db):
        rotina = self._criar_rotina(db, empresa, obrigacao)

        response = client.put(
            f"/rotinas-mensais/{rotina.id}/status",
            json={"status": "Cancelado"},
            headers=_auth(admin),
        )
        assert response.status_code == 400

    def test_rotina_inexistente(self, client, admin):
        response = client.put(
            "/rotinas-mensais/nao-existe/status",
            json={"status": "Concluido"},
            headers=_auth(admin),
        )
        assert response.status_code == 404

    def test_gerar_manual(self, client, admin, empresa, obrigacao, db):
        empresa.obrigacoes = [obrigacao.id]
        db.commit()

        response = client.post("/rotinas-mensais/gerar", json={}, headers=_auth(admin))

        assert response.status_code == 200
        assert response.json()["rotinas_criadas"] == 1
        assert response.json()["competencia"] == competence_key(today_local())

    def test_gerar_manual_executa_fora_do_event_loop(self, client, admin):
        execucoes = []

        def ciclo(agendador, empresa_id=None, hoje=None):
            try:
                asyncio.get_running_loop()
                execucoes.append("event loop")
            except RuntimeError:
                execucoes.append("executor")
            return {"competencia": "2024-03", "empresas": 0, "rotinas_criadas": 0}

        with patch.object(AgendadorRotinas, "executar_ciclo", ciclo):
            response = client.post("/rotinas-mensais/gerar", json={}, headers=_auth(admin))

        assert response.status_code == 200
        assert execucoes == ["executor"]



# ==================================================
# Notificações
# ==================================================

class TestNotificacoes:

    def test_enviar_listar_e_marcar_lida(self, client, admin, cliente):
        enviar = client.post(
            "/notificacoes/enviar",
            json={"usuario_ids": [cliente.id], "titulo": "Aviso", "mensagem": "Documentos pendentes"},
            headers=_auth(admin),
        )
        assert enviar.status_code == 200

        minhas = client.get("/notificacoes", headers=_auth(cliente)).json()
        assert [n["titulo"] for n in minhas] == ["Aviso"]

        lida = client.post(f"/notificacoes/{minhas[0]['id']}/lida", headers=_auth(cliente))
        assert lida.json()["lida"] is True

        nao_lidas = client.get("/notificacoes", params={"apenas_nao_lidas": True}, headers=_auth(cliente))
        assert nao_lidas.json() == []

    def test_enviar_para_usuario_inexistente(self, client, admin):
        response = client.post(
            "/notificacoes/enviar",
            json={"usuario_ids": ["nao-existe"], "titulo": "Aviso"},
            headers=_auth(admin),
        )
        assert response.status_code == 400

    def test_cliente_nao_marca_notificacao_alheia(self, client, admin, cliente, db):
        notificacao = Notificacao(usuario_id=admin.id, titulo="Interna")
        db.add(notificacao)
        db.commit()

        response = client.post(f"/notificacoes/{notificacao.id}/lida", headers=_auth(cliente))
        assert response.status_code == 403

    def test_admin_edita_e_exclui(self, client, admin, cliente, db):
        notificacao = Notificacao(usuario_id=cliente.id, titulo="Antigo")
        db.add(notificacao)
        db.commit()

        editada = client.put(
            f"/notificacoes/{notificacao.id}", json={"titulo": "Novo"}, headers=_auth(admin)
        )
        assert editada.json()["titulo"] == "Novo"

        assert client.delete(f"/notificacoes/{notificacao.id}", headers=_auth(admin)).status_code == 200
        db.expire_all()
        assert db.query(Notificacao).count() == 0


def test_health(client):
    response = client.get("/health")
    assert response.json()["status"] == "ok"
    assert response.headers["X-Request-ID"]


def test_request_id_recebido_e_devolvido(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


class AgendadorFalso:
    def __init__(self, eventos):
        self.eventos = eventos

    async def iniciar(self):
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            await asyncio.sleep(0)
            self.eventos.append("agendador encerrado")
            raise

    def parar(self):
        self.eventos.append("parar")


def test_shutdown_aguarda_agendador():
    eventos = []
    agendador = AgendadorFalso(eventos)

    with patch("main.init_database"), \
            patch("main.ROTINAS_AGENDADOR_HABILITADO", True), \
            patch("main.AgendadorRotinas", return_value=agendador), \
            patch("main.logger") as logger:
        logger.info.side_effect = lambda msg, **kw: eventos.append(msg)
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200

    assert eventos[-3:] == ["parar", "agendador encerrado", "Encerrando Portal Contábil"]
