import io
import os

# Banco em memória e hash rápido antes de importar a aplicação
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("SECRET_KEY", "chave-de-teste")

import pytest
from fastapi.testclient import TestClient
from PIL import Image

import main as app_main
from academia import auth, storage
from academia.achievements import seed_achievements
from academia.database import Base, SessionLocal, engine
from academia.models.aluno import Aluno
from academia.models.matricula import Matricula
from academia.models.turma import Turma
from academia.models.usuario import Usuario

TODOS_OS_DIAS = "segunda, terça, quarta, quinta, sexta, sábado e domingo"


@pytest.fixture
def db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    seed_achievements(session)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def uploads(monkeypatch):
    """Substitui o envio ao bucket e guarda as chaves enviadas."""
    enviados = []

    def fake_upload(file_obj, key, content_type="image/jpeg"):
        enviados.append((key, content_type, file_obj.read()))
        return f"https://cdn.academia.test/{key}"

    monkeypatch.setattr(storage, "upload_image", fake_upload)
    return enviados


@pytest.fixture
def removidos(monkeypatch):
    """Substitui a remoção de objetos do bucket e guarda as chaves removidas."""
    chaves = []
    monkeypatch.setattr(storage, "delete_image", chaves.append)
    return chaves


@pytest.fixture
def client(db, uploads):
    with TestClient(app_main.app) as client_instance:
        yield client_instance


def criar_usuario(db, username, role):
    usuario = Usuario(
        username=username,
        email=f"{username}@academia.com.br",
        nome=username.title(),
        hashed_password=auth.get_password_hash("senha123"),
        role=role,
    )
    db.add(usuario)
    db.commit()
    db.refresh(usuario)
    return usuario


def headers_para(usuario):
    token = auth.create_access_token({"sub": usuario.email, "role": usuario.role})
    return {"Authorization": f"Bearer {token}"}


def criar_aluno(db, username, **campos):
    usuario = criar_usuario(db, username, "aluno")
    aluno = Aluno(usuario_id=usuario.id, nome=usuario.nome, email=usuario.email, **campos)
    db.add(aluno)
    db.commit()
    db.refresh(aluno)
    return usuario, aluno


def criar_turma(db, nome="Jiu-Jitsu Adulto", horario=TODOS_OS_DIAS, gratuita=False):
    turma = Turma(nome=nome, gratuita=gratuita)
    turma.set_horario(horario)
    db.add(turma)
    db.commit()
    db.refresh(turma)
    return turma


def matricular(db, aluno, turma):
    matricula = Matricula(aluno_id=aluno.id, turma_id=turma.id)
    db.add(matricula)
    db.commit()
    return matricula


def imagem_jpeg(tamanho=(800, 600)):
    buffer = io.BytesIO()
    Image.new("RGB", tamanho, color=(200, 30, 30)).save(buffer, format="JPEG")
    buffer.seek(0)
    return buffer


@pytest.fixture
def admin(db):
    usuario = criar_usuario(db, "gestor", "administrador")
    return usuario, headers_para(usuario)


@pytest.fixture
def aluno_logado(db):
    usuario, aluno = criar_aluno(db, "joana", mensalidade=150.0, dia_vencimento=10)
    return aluno, headers_para(usuario)
