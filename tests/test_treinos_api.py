from datetime import datetime

from academia.config import reference_tz
from academia.models.notificacao import Notificacao
from academia.models.post_treino import PostTreino
from academia.routes import treinos_fastapi

from conftest import criar_aluno, criar_turma, headers_para, imagem_jpeg, matricular


def _postar(client, headers, **dados):
    return client.post(
        "/api/v1/treinos",
        files={"foto": ("treino.jpg", imagem_jpeg(), "image/jpeg")},
        data=dados,
        headers=headers,
    )


def test_um_post_por_dia(client, aluno_logado, uploads):
    _, headers = aluno_logado

    response = _postar(client, headers, legenda="Treino de guarda")
    assert response.status_code == 201
    assert response.json()["foto_url"].endswith(".jpg")
    assert response.json()["thumbnail_url"].endswith("_thumb.jpg")
    assert len(uploads) == 2

    repetido = _postar(client, headers)
    assert repetido.status_code == 409
    assert repetido.json()["detail"] == "Você já postou uma foto para este dia!"
    assert len(uploads) == 2


def test_arquivo_que_nao_e_imagem(client, aluno_logado, uploads):
    _, headers = aluno_logado
    response = client.post(
        "/api/v1/treinos",
        files={"foto": ("treino.jpg", b"isto nao e uma imagem", "image/jpeg")},
        headers=headers,
    )
    assert response.status_code == 400
    assert uploads == []


def test_reacao_alterna(client, db, aluno_logado):
    autor, headers_autor = aluno_logado
    post_id = _postar(client, headers_autor).json()["id"]
    usuario, _ = criar_aluno(db, "carla")
    headers = headers_para(usuario)

    url = f"/api/v1/treinos/{post_id}/reacoes"
    assert client.post(url, json={"tipo": "fogo"}, headers=headers).json()["acao"] == "adicionada"
    assert client.post(url, json={"tipo": "forca"}, headers=headers).json()["acao"] == "alterada"
    assert client.post(url, json={"tipo": "forca"}, headers=headers).json()["acao"] == "removida"

    feed = client.get("/api/v1/treinos", headers=headers).json()
    assert feed[0]["total_reacoes"] == 0

    db.expire_all()
    notificacoes = db.query(Notificacao).filter(Notificacao.aluno_id == autor.id).all()
    assert [n.tipo for n in notificacoes] == ["reacao"]


def test_reacao_invalida(client, aluno_logado):
    _, headers = aluno_logado
    post_id = _postar(client, headers).json()["id"]
    response = client.post(f"/api/v1/treinos/{post_id}/reacoes", json={"tipo": "raiva"}, headers=headers)
    assert response.status_code == 422


def test_comentarios_e_notificacoes(client, db, aluno_logado):
    _, headers_autor = aluno_logado
    post_id = _postar(client, headers_autor).json()["id"]
    usuario, _ = criar_aluno(db, "pedro")
    headers = headers_para(usuario)

    criado = client.post(f"/api/v1/treinos/{post_id}/comentarios", json={"texto": "Boa!"}, headers=headers)
    assert criado.status_code == 201
    assert criado.json()["aluno_nome"] == "Pedro"

    comentarios = client.get(f"/api/v1/treinos/{post_id}/comentarios", headers=headers_autor).json()
    assert [c["texto"] for c in comentarios] == ["Boa!"]

    notificacoes = client.get("/api/v1/notificacoes", headers=headers_autor).json()
    assert notificacoes[0]["tipo"] == "comentario"
    assert notificacoes[0]["remetente_nome"] == "Pedro"
    assert client.get("/api/v1/notificacoes/nao-lidas", headers=headers_autor).json() == {"nao_lidas": 1}

    client.post("/api/v1/notificacoes/lidas", headers=headers_autor)
    assert client.get("/api/v1/notificacoes/nao-lidas", headers=headers_autor).json() == {"nao_lidas": 0}

    assert client.delete(f"/api/v1/treinos/comentarios/{criado.json()['id']}", headers=headers_autor).status_code == 403


def test_excluir_post_so_pelo_dono(client, db, aluno_logado, admin):
    _, headers_autor = aluno_logado
    _, headers_admin = admin
    post_id = _postar(client, headers_autor).json()["id"]
    usuario, _ = criar_aluno(db, "intrusa")

    assert client.delete(f"/api/v1/treinos/{post_id}", headers=headers_para(usuario)).status_code == 403
    assert client.delete(f"/api/v1/treinos/{post_id}", headers=headers_admin).status_code == 204


def test_ranking_semanal(client, db, aluno_logado):
    aluno, headers = aluno_logado
    turma = criar_turma(db)
    matricular(db, aluno, turma)
    usuario, outro = criar_aluno(db, "bruno")
    matricular(db, outro, turma)

    client.post("/api/v1/portal/checkin", json={"turma_id": turma.id}, headers=headers_para(usuario))
    client.post("/api/v1/portal/checkin", json={"turma_id": turma.id}, headers=headers)
    _postar(client, headers)

    ranking = client.get("/api/v1/treinos/ranking-semanal", headers=headers).json()
    assert [(r["nome"], r["score"]) for r in ranking] == [("Joana", 3), ("Bruno", 2)]
    assert ranking[0]["posicao"] == 1
    assert ranking[0]["post_count"] == 1


def test_post_em_turma_sem_matricula(client, db, aluno_logado, uploads):
    aluno, headers = aluno_logado
    outra = criar_turma(db, nome="Karatê")
    response = _postar(client, headers, turma_id=str(outra.id))
    assert response.status_code == 403
    assert uploads == []

    matricular(db, aluno, outra)
    response = _postar(client, headers, turma_id=str(outra.id))
    assert response.status_code == 201
    assert response.json()["turma_id"] == outra.id


def test_post_concorrente_remove_fotos_enviadas(client, db, aluno_logado, uploads, removidos, monkeypatch):
    aluno, headers = aluno_logado
    processar = treinos_fastapi.process_training_photo

    def post_chega_antes(arquivo):
        # Outro post do mesmo aluno e dia é gravado entre a checagem e o commit
        db.add(PostTreino(aluno_id=aluno.id, data_treino=datetime.now(reference_tz()).date(),
                          foto_url="https://cdn.academia.test/outro.jpg"))
        db.commit()
        return processar(arquivo)

    monkeypatch.setattr(treinos_fastapi, "process_training_photo", post_chega_antes)

    response = _postar(client, headers)
    assert response.status_code == 409
    assert response.json()["detail"] == "Você já postou uma foto para este dia!"
    assert sorted(removidos) == sorted(key for key, _, _ in uploads)
    assert len(removidos) == 2
