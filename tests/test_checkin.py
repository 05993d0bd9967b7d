from datetime import date, datetime, time

import pytest
from dateutil import tz

from academia.checkin import (Horario, MSG_ANTES_DA_JANELA, MSG_DIA_SEM_TREINO, MSG_DISPONIVEL,
                              checkin_opens_at, is_checkin_available, parse_schedule,
                              schedule_window)
from academia.config import reference_tz

FUSO = reference_tz()

# 2026-10-19 é uma segunda-feira
SEGUNDA = date(2026, 10, 19)
TERCA = date(2026, 10, 20)
DOMINGO = date(2026, 10, 25)


def em(dia, hora, minuto=0, segundo=0):
    return datetime(dia.year, dia.month, dia.day, hora, minuto, segundo, tzinfo=FUSO)


def test_resultado_e_deterministico():
    agora = em(TERCA, 18, 45)
    resultados = {is_checkin_available("Terça, 19h-20h", agora, FUSO) for _ in range(5)}
    assert len(resultados) == 1


def test_sem_hora_no_texto_libera_checkin():
    resultado = is_checkin_available("Segunda e Quarta", em(SEGUNDA, 10), FUSO)
    assert resultado.available is True
    assert resultado.message == MSG_DISPONIVEL


@pytest.mark.parametrize("agora, disponivel", [
    (em(TERCA, 18, 29), False),
    (em(TERCA, 18, 30), True),
    (em(TERCA, 23, 59, 59), True),
    (em(date(2026, 10, 21), 0, 0, 1), False),
])
def test_limites_da_janela(agora, disponivel):
    assert is_checkin_available("Terça, 19h-20h", agora, FUSO).available is disponivel


def test_mensagens_fora_da_janela():
    cedo = is_checkin_available("Terça, 19h-20h", em(TERCA, 18, 29), FUSO)
    assert cedo.message == MSG_ANTES_DA_JANELA.format(hora="18:30")
    assert cedo.next_allowed_at == em(TERCA, 18, 30)

    quarta = is_checkin_available("Terça, 19h-20h", em(date(2026, 10, 21), 0, 0, 1), FUSO)
    assert quarta.message == MSG_DIA_SEM_TREINO
    assert quarta.next_allowed_at == em(date(2026, 10, 27), 18, 30)


@pytest.mark.parametrize("agora, disponivel", [
    (em(DOMINGO, 23, 29), False),
    (em(DOMINGO, 23, 30), True),
])
def test_aula_a_meia_noite(agora, disponivel):
    assert is_checkin_available("Domingo, 0h-1h", agora, FUSO).available is disponivel


def test_dia_avaliado_no_fuso_de_referencia():
    # 21:30 UTC de terça = 18:30 em São Paulo
    agora_utc = datetime(2026, 10, 20, 21, 30, tzinfo=tz.UTC)
    assert is_checkin_available("Terça, 19h-20h", agora_utc, FUSO).available is True

    um_minuto_antes = datetime(2026, 10, 20, 21, 29, tzinfo=tz.UTC)
    assert is_checkin_available("Terça, 19h-20h", um_minuto_antes, FUSO).available is False


def test_datetime_sem_fuso_e_horario_local():
    assert is_checkin_available("Terça, 19h-20h", datetime(2026, 10, 20, 18, 30), FUSO).available is True


@pytest.mark.parametrize("horario", [None, "", "   ", 42])
def test_horario_vazio_ou_invalido_libera(horario):
    assert is_checkin_available(horario, em(TERCA, 3), FUSO).available is True


def test_hora_impossivel_e_tratada_como_sem_hora():
    assert is_checkin_available("Terça 25h", em(TERCA, 1), FUSO).available is True


def test_entrada_inesperada_nunca_lanca_excecao():
    resultado = is_checkin_available("Terça, 19h-20h", "agora", FUSO)
    assert resultado.available is True


def test_horario_estruturado_tem_o_mesmo_resultado_do_texto():
    horario = Horario(dias=frozenset({1}), inicio=time(19), fim=time(20))
    for agora in (em(TERCA, 18, 29), em(TERCA, 18, 30), em(SEGUNDA, 19)):
        assert (is_checkin_available(horario, agora, FUSO)
                == is_checkin_available("Terça, 19h-20h", agora, FUSO))


def test_schedule_window():
    assert schedule_window("", TERCA) is None
    assert schedule_window("Segunda, 19h", TERCA).matched_today is False

    janela = schedule_window("TERÇA e Quinta às 7h30", TERCA)
    assert janela.matched_today is True
    assert janela.start_hour == 7

    assert schedule_window("terca, 20h", TERCA).start_hour == 20


def test_tabela_de_dias_e_parametro():
    nomes_en = {0: ("monday",), 1: ("tuesday",), 2: ("wednesday",), 3: ("thursday",),
                4: ("friday",), 5: ("saturday",), 6: ("sunday",)}
    janela = schedule_window("Tuesday 19h", TERCA, nomes_en)
    assert janela.matched_today is True
    assert janela.start_hour == 19


def test_abertura_da_janela():
    assert checkin_opens_at(19) == time(18, 30)
    assert checkin_opens_at(1) == time(0, 30)
    assert checkin_opens_at(0) == time(23, 30)


def test_parse_schedule_usa_apenas_a_primeira_faixa():
    horario = parse_schedule("Segunda 7h-8h e 19h-20h")
    assert horario.dias == frozenset({0})
    assert horario.inicio == time(7)
    assert horario.fim == time(8)


def test_parse_schedule_com_minutos_e_varios_dias():
    horario = parse_schedule("Segunda, Quarta e Sexta - 6h30 às 7h30")
    assert horario.dias == frozenset({0, 2, 4})
    assert horario.inicio == time(6, 30)
    assert horario.fim == time(7, 30)
    assert horario.hora_inicio == 6
