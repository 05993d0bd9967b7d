# -*- coding: utf-8 -*-
"""
Arquivo principal da aplicação FastAPI da academia: check-in, feed de
treinos, ranking semanal e gestão.
"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import create_first_user
from academia import realtime
from academia.achievements import seed_achievements
from academia.config import Config
from academia.database import engine, Base, SessionLocal

# Importação dos modelos para garantir que o SQLAlchemy registre tudo
from academia.models import (usuario, aluno, professor, turma, matricula, presenca,  # noqa: F401
                             post_treino, notificacao, conquista, aviso)

from academia.routes import (auth_fastapi, usuarios_fastapi, alunos_fastapi, professores_fastapi,
                             turmas_fastapi, matriculas_fastapi, presencas_fastapi,
                             portal_aluno_fastapi, treinos_fastapi, notificacoes_fastapi,
                             conquistas_fastapi, avisos_fastapi, relatorios_fastapi)


logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=Config.LOG_FILE
)
logger = logging.getLogger(__name__)

# Cria as tabelas no banco de dados
Base.metadata.create_all(bind=engine)

# Avisos de alteração das tabelas (check-ins, posts) para quem assina o feed
realtime.install(SessionLocal)

producao = Config.ENVIRONMENT == "production"

# Inicializa a aplicação FastAPI
app = FastAPI(
    title="API Academia de Lutas",
    description="Check-in, feed de treinos, ranking semanal e gestão da academia",
    version="2.0.0",
    docs_url=None if producao else "/docs",
    redoc_url=None if producao else "/redoc",
    openapi_url=None if producao else "/openapi.json"
)

origins = [
    Config.FRONTEND_URL,
    "http://localhost:5700",
    "http://localhost",
    "http://localhost:8080",
    "http://127.0.0.1",
    "http://127.0.0.1:8080",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Montagem dos routers
app.include_router(auth_fastapi.router)
app.include_router(usuarios_fastapi.router)
app.include_router(alunos_fastapi.router)
app.include_router(professores_fastapi.router)
app.include_router(turmas_fastapi.router)
app.include_router(matriculas_fastapi.router)
app.include_router(matriculas_fastapi.solicitacoes_router)
app.include_router(presencas_fastapi.router)
app.include_router(portal_aluno_fastapi.router)
app.include_router(treinos_fastapi.router)
app.include_router(notificacoes_fastapi.router)
app.include_router(conquistas_fastapi.router)
app.include_router(avisos_fastapi.router)
app.include_router(relatorios_fastapi.router)


create_first_user.create_first_user()

_db = SessionLocal()
try:
    seed_achievements(_db)
finally:
    _db.close()


@app.get("/", tags=["Root"])
async def root():
    return {
        "mensagem": "API Academia de Lutas",
        "documentacao": None if producao else "/docs",
        "endpoints": [
            {"portal": "/api/v1/portal"},
            {"treinos": "/api/v1/treinos"},
            {"turmas": "/api/v1/turmas"},
            {"alunos": "/api/v1/alunos"},
            {"presencas": "/api/v1/presencas"},
            {"relatorios": "/api/v1/relatorios"},
        ]
    }
