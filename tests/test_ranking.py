from collections import namedtuple
from datetime import date, datetime

from academia.config import reference_tz
from academia.ranking import (calculate_default_weekly_goal, rank_weekly, week_bounds,
                              weekly_progress)
from academia.repository import AgendaMatricula

Registro = namedtuple("Registro", ["aluno_id"])


def test_pontuacao_semanal():
    presencas = [{"aluno_id": "A"}, {"aluno_id": "A"}, {"aluno_id": "B"}, {"aluno_id": "A"}]
    posts = [{"aluno_id": "A"}]

    ranking = rank_weekly(presencas, posts)

    assert [(p.aluno_id, p.score) for p in ranking] == [("A", 7), ("B", 2)]
    assert ranking[0].checkin_count == 3
    assert ranking[0].post_count == 1


def test_empate_mantem_ordem_de_aparicao():
    presencas = [Registro(10), Registro(20), Registro(30), Registro(30)]
    ranking = rank_weekly(presencas, [])
    assert [p.aluno_id for p in ranking] == [30, 10, 20]


def test_posts_contam_antes_dos_checkins_no_desempate():
    # 20 aparece primeiro nos posts; 10 e 20 empatam com 3 pontos
    presencas = [Registro(10), Registro(20)]
    posts = [Registro(20), Registro(10)]
    assert [p.aluno_id for p in rank_weekly(presencas, posts)] == [20, 10]


def test_limite_e_pontuacao_customizada():
    presencas = [Registro(i) for i in range(15)]
    ranking = rank_weekly(presencas, [Registro(14)], pontuacao={"checkin": 1, "post": 5}, limite=10)
    assert len(ranking) == 10
    assert ranking[0].aluno_id == 14
    assert ranking[0].score == 6


def test_pontuacao_parcial_usa_o_padrao_no_resto():
    ranking = rank_weekly([Registro(1)], [Registro(1), Registro(2)], pontuacao={"checkin": 3})
    assert [(p.aluno_id, p.score) for p in ranking] == [(1, 4), (2, 1)]


def test_semana_vazia():
    assert rank_weekly([], []) == []


def test_limites_da_semana():
    assert week_bounds(date(2026, 10, 22)) == (date(2026, 10, 19), date(2026, 10, 26))
    assert week_bounds(date(2026, 10, 25)) == (date(2026, 10, 19), date(2026, 10, 26))
    assert week_bounds(date(2026, 10, 19)) == (date(2026, 10, 19), date(2026, 10, 26))


def test_progresso_semanal():
    fuso = reference_tz()
    instantes = [
        datetime(2026, 10, 19, 2, 0),   # domingo 23:00 em São Paulo: semana anterior
        datetime(2026, 10, 20, 22, 0),  # terça
        datetime(2026, 10, 22, 12, 0),  # quinta
    ]
    progresso = weekly_progress(instantes, 3, date(2026, 10, 22), fuso)

    assert progresso.inicio_semana == date(2026, 10, 19)
    assert progresso.total == 2
    assert progresso.percentual == 66.7
    assert progresso.meta_atingida is False
    assert list(progresso.dias.values()) == [False, True, False, True, False, False, False]


def test_progresso_semanal_limita_em_100():
    fuso = reference_tz()
    instantes = [datetime(2026, 10, d, 15, 0) for d in (19, 20, 21, 22)]
    progresso = weekly_progress(instantes, 2, date(2026, 10, 22), fuso)
    assert progresso.percentual == 100.0
    assert progresso.meta_atingida is True


def test_meta_padrao_conta_dias_distintos():
    matriculas = [
        AgendaMatricula(1, "Segunda, Quarta 19h"),
        AgendaMatricula(2, "quarta e sexta, 7h"),
    ]
    assert calculate_default_weekly_goal(matriculas) == 3


def test_meta_padrao_sem_matriculas():
    assert calculate_default_weekly_goal([]) == 3


def test_meta_padrao_sem_dias_reconhecidos():
    assert calculate_default_weekly_goal(["Horário a combinar", None]) == 3


def test_meta_padrao_aceita_texto():
    assert calculate_default_weekly_goal(["Sábado 10h", "Terca 19h", "sabado 9h"]) == 2
