from datetime import date

import pytest

from academia.reports import (attendance_rate, due_within, engagement_bucket, next_payment_date,
                              risk_level)


@pytest.mark.parametrize("dia, hoje, esperado", [
    (10, date(2026, 10, 19), date(2026, 11, 10)),
    (19, date(2026, 10, 19), date(2026, 10, 19)),
    (25, date(2026, 10, 19), date(2026, 10, 25)),
    (31, date(2026, 2, 10), date(2026, 2, 28)),
    (31, date(2026, 1, 31), date(2026, 1, 31)),
    (30, date(2026, 1, 31), date(2026, 2, 28)),
])
def test_proximo_vencimento(dia, hoje, esperado):
    assert next_payment_date(dia, hoje) == esperado


def test_sem_dia_de_vencimento():
    assert next_payment_date(None, date(2026, 10, 19)) is None
    assert due_within(None, date(2026, 10, 19)) is False


def test_vencimento_proximo():
    hoje = date(2026, 10, 19)
    assert due_within(25, hoje) is True
    assert due_within(19, hoje) is True
    assert due_within(30, hoje) is False
    assert due_within(5, hoje) is False


@pytest.mark.parametrize("checkins, rotulo", [
    (15, "Muito Ativo (12+)"),
    (12, "Muito Ativo (12+)"),
    (9, "Ativo (8-11)"),
    (4, "Moderado (4-7)"),
    (0, "Baixo (<4)"),
])
def test_faixa_de_engajamento(checkins, rotulo):
    assert engagement_bucket(checkins) == rotulo


def test_taxa_de_presenca():
    assert attendance_rate(6) == 50
    assert attendance_rate(36, 3) == 100
    assert attendance_rate(5, 0) == 0


@pytest.mark.parametrize("dias, taxa, risco", [
    (None, 0, "alto"),
    (15, 80, "alto"),
    (8, 80, "medio"),
    (3, 40, "medio"),
    (3, 60, "baixo"),
])
def test_risco_de_evasao(dias, taxa, risco):
    assert risk_level(dias, taxa) == risco
