from academia.models.aluno import Aluno

from conftest import criar_aluno, criar_turma, criar_usuario, headers_para, matricular


def test_login_por_usuario_ou_email(client, db):
    criar_usuario(db, "sensei", "instrutor")

    for login in ("sensei", "sensei@academia.com.br"):
        response = client.post("/api/v1/auth/token", data={"username": login, "password": "senha123"})
        assert response.status_code == 200
        assert response.json()["user_info"]["role"] == "instrutor"

    errado = client.post("/api/v1/auth/token", data={"username": "sensei", "password": "errada"})
    assert errado.status_code == 401


def test_conta_pendente_e_bloqueada(client, db):
    usuario = criar_usuario(db, "aguardando", "pendente")
    response = client.get("/api/v1/auth/me", headers=headers_para(usuario))
    assert response.status_code == 403


def test_turma_grava_horario_estruturado(client, admin):
    _, headers = admin
    response = client.post(
        "/api/v1/turmas",
        json={"nome": "Judô Infantil", "horario": "Segunda e Quarta, 19h-20h"},
        headers=headers,
    )
    assert response.status_code == 201
    turma = response.json()
    assert turma["dias"] == [0, 2]
    assert turma["hora_inicio"] == "19:00:00"
    assert turma["hora_fim"] == "20:00:00"

    atualizada = client.put(f"/api/v1/turmas/{turma['id']}", json={"horario": "Sábado 10h"}, headers=headers)
    assert atualizada.json()["dias"] == [5]
    assert atualizada.json()["hora_fim"] is None


def test_valor_total_da_turma(client, db, admin):
    _, headers = admin
    paga = criar_turma(db, nome="Boxe")
    livre = criar_turma(db, nome="Aulão", gratuita=True)
    for username, valor in (("ana", 120.0), ("rui", 80.0)):
        _, aluno = criar_aluno(db, username, mensalidade=valor)
        matricular(db, aluno, paga)
        matricular(db, aluno, livre)

    turmas = {t["nome"]: t for t in client.get("/api/v1/turmas", headers=headers).json()}
    assert turmas["Boxe"]["valor_total"] == 200.0
    assert turmas["Boxe"]["total_alunos"] == 2
    assert turmas["Aulão"]["valor_total"] == 0.0


def test_aluno_nao_acessa_rotas_da_equipe(client, aluno_logado):
    _, headers = aluno_logado
    assert client.get("/api/v1/alunos", headers=headers).status_code == 403
    assert client.get("/api/v1/presencas", headers=headers).status_code == 403
    assert client.post("/api/v1/turmas", json={"nome": "X", "horario": "Segunda"}, headers=headers).status_code == 403


def test_excluir_usuario_remove_perfil_de_aluno(client, db, admin):
    _, headers = admin
    usuario, aluno = criar_aluno(db, "saindo")
    aluno_id = aluno.id

    response = client.delete(f"/api/v1/usuarios/{usuario.id}", headers=headers)
    assert response.status_code == 204

    db.expire_all()
    assert db.query(Aluno).filter(Aluno.id == aluno_id).first() is None


def test_presencas_com_totais(client, db, admin, aluno_logado):
    _, headers_admin = admin
    aluno, headers = aluno_logado
    turma = criar_turma(db)
    matricular(db, aluno, turma)
    client.post("/api/v1/portal/checkin", json={"turma_id": turma.id}, headers=headers)

    listagem = client.get("/api/v1/presencas", headers=headers_admin).json()
    assert listagem["total"] == 1
    assert listagem["hoje"] == 1
    assert listagem["ultimos_7_dias"] == 1
    assert listagem["registros"][0]["aluno_nome"] == "Joana"


def test_relatorios(client, db, admin, aluno_logado):
    _, headers_admin = admin
    aluno, headers = aluno_logado
    turma = criar_turma(db)
    matricular(db, aluno, turma)
    client.post("/api/v1/portal/checkin", json={"turma_id": turma.id}, headers=headers)

    admin_rel = client.get("/api/v1/relatorios/admin", headers=headers_admin).json()
    assert admin_rel["financeiro"]["receita_mensal"] == 150.0
    assert admin_rel["financeiro"]["alunos_ativos"] == 1
    assert admin_rel["turmas"][0]["checkins_30_dias"] == 1
    assert admin_rel["engajamento"]["Baixo (<4)"] == 1
    assert len(admin_rel["retencao"]) == 6

    instrutor_rel = client.get("/api/v1/relatorios/instrutor", headers=headers_admin).json()
    assert instrutor_rel["alunos"][0]["risco"] == "medio"
    assert instrutor_rel["alunos"][0]["dias_sem_treinar"] == 0
    assert len(instrutor_rel["tendencia"]) == 8
    assert instrutor_rel["tendencia"][-1]["checkins"] == 1


def test_avisos(client, db, admin, aluno_logado):
    _, headers_admin = admin
    _, headers = aluno_logado
    client.post("/api/v1/avisos", json={"titulo": "Graduação", "conteudo": "Dia 30"}, headers=headers_admin)
    client.post("/api/v1/avisos", json={"titulo": "Rascunho", "conteudo": "...", "publicado": False},
                headers=headers_admin)

    assert [a["titulo"] for a in client.get("/api/v1/avisos", headers=headers).json()] == ["Graduação"]
    assert len(client.get("/api/v1/avisos", headers=headers_admin).json()) == 2
    assert client.post("/api/v1/avisos", json={"titulo": "X", "conteudo": "Y"}, headers=headers).status_code == 403
