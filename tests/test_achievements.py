from datetime import date, datetime, timedelta

from academia.achievements import checkin_streak, evaluate_achievements
from academia.models.conquista import ConquistaAluno
from academia.models.presenca import Presenca

from conftest import criar_aluno, criar_turma

HOJE = date(2026, 10, 22)


def test_sequencia_termina_hoje():
    dias = [HOJE, HOJE - timedelta(days=1), HOJE - timedelta(days=2), HOJE - timedelta(days=4)]
    assert checkin_streak(dias, HOJE) == 3


def test_sequencia_conta_a_partir_de_ontem_se_hoje_nao_treinou():
    dias = [HOJE - timedelta(days=1), HOJE - timedelta(days=2)]
    assert checkin_streak(dias, HOJE) == 2


def test_sem_sequencia():
    assert checkin_streak([HOJE - timedelta(days=3)], HOJE) == 0
    assert checkin_streak([], HOJE) == 0


def _presenca(db, aluno, turma, dia):
    db.add(Presenca(aluno_id=aluno.id, turma_id=turma.id,
                    registrado_em=datetime.combine(dia, datetime.min.time()) + timedelta(hours=22),
                    data_presenca=dia))
    db.commit()


def test_desbloqueia_conquistas_uma_unica_vez(db):
    _, aluno = criar_aluno(db, "marcos")
    turma = criar_turma(db)
    for delta in (2, 1, 0):
        _presenca(db, aluno, turma, HOJE - timedelta(days=delta))

    desbloqueadas = evaluate_achievements(db, aluno.id, HOJE)
    assert {c.nome for c in desbloqueadas} == {"Primeiro Treino", "Em Chamas"}

    assert evaluate_achievements(db, aluno.id, HOJE) == []


def test_progresso_parcial_e_gravado(db):
    _, aluno = criar_aluno(db, "lucia")
    turma = criar_turma(db)
    for delta in range(4):
        _presenca(db, aluno, turma, HOJE - timedelta(days=delta * 2))

    evaluate_achievements(db, aluno.id, HOJE)

    registros = {
        ca.conquista.nome: ca
        for ca in db.query(ConquistaAluno).filter(ConquistaAluno.aluno_id == aluno.id).all()
    }
    assert registros["Dedicação"].progresso == 4
    assert registros["Dedicação"].concluida is False
    assert registros["Primeiro Treino"].concluida is True
    assert registros["Primeiro Treino"].desbloqueada_em is not None
