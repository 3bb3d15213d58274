# main.py
"""
Portal Contábil - Aplicação FastAPI Principal

Reúne:
- Cadastro de empresas e usuários (administradores e clientes)
- Catálogo de obrigações e rotinas mensais
- Notificações internas

Com autenticação centralizada via JWT.
"""

import asyncio
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from config import CORS_ORIGINS, ROTINAS_AGENDADOR_HABILITADO
from database.init_db import init_database
from middleware import RequestIDMiddleware
from utils.logging_config import get_logger, setup_logging
from utils.rate_limit import limiter, rate_limit_exceeded_handler

from auth.router import router as auth_router
from users.router import router as users_router

# Import dos sistemas
from sistemas.empresas.router import router as empresas_router
from sistemas.obrigacoes.agendador import AgendadorRotinas
from sistemas.obrigacoes.router import router as obrigacoes_router, router_rotinas
from sistemas.notificacoes.router import router as notificacoes_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle events da aplicação.
    Executa na inicialização e no shutdown.
    """
    # Startup
    setup_logging()
    logger.info("Iniciando Portal Contábil")
    init_database()

    agendador = None
    tarefa_agendador = None
    if ROTINAS_AGENDADOR_HABILITADO:
        agendador = AgendadorRotinas()
        tarefa_agendador = asyncio.create_task(agendador.iniciar())

    yield

    # Shutdown
    if agendador:
        agendador.parar()
        tarefa_agendador.cancel()
        with suppress(asyncio.CancelledError):
            await tarefa_agendador
    logger.info("Encerrando Portal Contábil")


# Cria a aplicação FastAPI
app = FastAPI(
    title="Portal Contábil",
    description="Portal do escritório de contabilidade: empresas, obrigações e rotinas mensais",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Configuração de CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestIDMiddleware)


@app.exception_handler(Exception)
async def erro_nao_tratado(request: Request, exc: Exception):
    logger.exception("Erro não tratado", path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Erro interno do servidor"})


# ==================================================
# ROTAS DO PORTAL
# ==================================================

@app.get("/health")
async def health_check():
    """Health check para monitoramento"""
    return {
        "status": "ok",
        "service": "portal-contabil",
    }


# ==================================================
# ROUTERS DE AUTENTICAÇÃO E USUÁRIOS
# ==================================================

app.include_router(auth_router)
app.include_router(users_router)


# ==================================================
# ROUTERS DOS SISTEMAS
# ==================================================

app.include_router(empresas_router)
app.include_router(obrigacoes_router)
app.include_router(router_rotinas)
app.include_router(notificacoes_router)


# ==================================================
# EXECUÇÃO DIRETA
# ==================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
