# -*- coding: utf-8 -*-
"""
Janela de check-in a partir do horário das turmas.

O horário das turmas é texto livre em português ("Segunda e Quarta, 19h-20h").
Este módulo reconhece os dias da semana e a hora de início nesse texto e
decide se o aluno pode fazer check-in em um dado instante.

Regras da janela:
  - só abre em dia de treino;
  - abre às (hora_inicio - 1):30; aula à meia-noite (0h) abre às 23:30;
  - fecha às 23:59 do mesmo dia, independente do fim da aula;
  - sem hora reconhecível no texto, o check-in fica liberado o dia inteiro.

Nenhuma função aqui lança exceção para entrada ruim: na dúvida o check-in é
liberado, porque barrar um aluno presente na academia custa mais caro do que
aceitar um check-in indevido.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, FrozenSet, Optional, Tuple, Union

logger = logging.getLogger(__name__)

# Índice = date.weekday() (segunda-feira = 0)
NOMES_DIAS_PT: Dict[int, Tuple[str, ...]] = {
    0: ("segunda",),
    1: ("terça", "terca"),
    2: ("quarta",),
    3: ("quinta",),
    4: ("sexta",),
    5: ("sábado", "sabado"),
    6: ("domingo",),
}

# Primeiro inteiro seguido do marcador de hora ("19h", "7h30")
HORA_RE = re.compile(r"(\d+)h(\d{2})?")

CHECKIN_FECHA = time(23, 59, 59, 999999)

MSG_DISPONIVEL = "Check-in disponível"
MSG_DIA_SEM_TREINO = "Check-in disponível apenas em dias de treino"
MSG_ANTES_DA_JANELA = "Check-in disponível a partir das {hora}"
MSG_ENCERRADO = "Check-in encerrado para hoje"


@dataclass(frozen=True)
class Horario:
    """Horário estruturado de uma turma: dias da semana e faixa de horas."""
    dias: FrozenSet[int] = field(default_factory=frozenset)
    inicio: Optional[time] = None
    fim: Optional[time] = None

    @property
    def hora_inicio(self) -> Optional[int]:
        return self.inicio.hour if self.inicio is not None else None


@dataclass(frozen=True)
class JanelaHorario:
    matched_today: bool
    start_hour: Optional[int] = None


@dataclass(frozen=True)
class DisponibilidadeCheckin:
    available: bool
    message: str
    next_allowed_at: Optional[datetime] = None


def _dias_no_texto(texto: str, nomes_dias: Dict[int, Tuple[str, ...]]) -> FrozenSet[int]:
    return frozenset(
        dia for dia, nomes in nomes_dias.items()
        if any(nome in texto for nome in nomes)
    )


def _hora(valor: str, minutos: Optional[str]) -> Optional[time]:
    hora = int(valor)
    if hora > 23:
        return None
    minuto = int(minutos) if minutos else 0
    if minuto > 59:
        minuto = 0
    return time(hora, minuto)


def parse_schedule(texto, nomes_dias=NOMES_DIAS_PT) -> Optional[Horario]:
    """
    Converte o texto livre de horário em um `Horario`.

    Usado na fronteira do modelo de dados (cadastro/edição de turma e
    importação de turmas antigas). Só a primeira faixa de horas é
    reconhecida: "Seg 7h-8h e 19h-20h" vira início 7h, fim 8h.
    Retorna None para texto vazio ou que não é string.
    """
    if not isinstance(texto, str) or not texto.strip():
        return None

    texto = texto.lower()
    horas = HORA_RE.findall(texto)
    inicio = _hora(*horas[0]) if horas else None
    fim = _hora(*horas[1]) if len(horas) > 1 else None
    return Horario(dias=_dias_no_texto(texto, nomes_dias), inicio=inicio, fim=fim)


def schedule_window(schedule: Union[str, Horario, None], today: date,
                    nomes_dias=NOMES_DIAS_PT) -> Optional[JanelaHorario]:
    """
    Verifica se `today` é dia de treino e qual a hora de início da aula.

    Retorna None quando não há horário algum para analisar.
    """
    if isinstance(schedule, Horario):
        horario = schedule
    else:
        horario = parse_schedule(schedule, nomes_dias)
    if horario is None:
        return None

    if today.weekday() not in horario.dias:
        return JanelaHorario(matched_today=False)
    return JanelaHorario(matched_today=True, start_hour=horario.hora_inicio)


def checkin_opens_at(start_hour: int) -> time:
    # Aula à meia-noite: a janela abre às 23:30, sem hora negativa
    if start_hour == 0:
        return time(23, 30)
    return time(start_hour - 1, 30)


def _to_reference(now: datetime, tzinfo) -> datetime:
    # Datetime sem fuso é interpretado como horário de parede no fuso de referência
    if now.tzinfo is None:
        return now.replace(tzinfo=tzinfo)
    return now.astimezone(tzinfo)


def _proximo_dia_de_treino(horario: Horario, hoje: date) -> Optional[date]:
    for delta in range(1, 8):
        dia = hoje + timedelta(days=delta)
        if dia.weekday() in horario.dias:
            return dia
    return None


def _proxima_abertura(schedule, hoje: date, tzinfo, nomes_dias) -> Optional[datetime]:
    horario = schedule if isinstance(schedule, Horario) else parse_schedule(schedule, nomes_dias)
    if horario is None:
        return None
    dia = _proximo_dia_de_treino(horario, hoje)
    if dia is None:
        return None
    abertura = time(0, 0)
    if horario.hora_inicio is not None:
        abertura = checkin_opens_at(horario.hora_inicio)
    return datetime.combine(dia, abertura, tzinfo=tzinfo)


def is_checkin_available(schedule: Union[str, Horario, None], now: datetime, tzinfo,
                         nomes_dias=NOMES_DIAS_PT) -> DisponibilidadeCheckin:
    """
    Decide se o check-in está liberado para a turma no instante `now`.

    `tzinfo` é o fuso de referência do sistema; o dia da semana e a hora são
    sempre avaliados nele, nunca no fuso do dispositivo.
    """
    try:
        local = _to_reference(now, tzinfo)
        hoje = local.date()

        janela = schedule_window(schedule, hoje, nomes_dias)
        if janela is None:
            return DisponibilidadeCheckin(True, MSG_DISPONIVEL)

        if not janela.matched_today:
            return DisponibilidadeCheckin(
                False, MSG_DIA_SEM_TREINO,
                _proxima_abertura(schedule, hoje, tzinfo, nomes_dias),
            )

        if janela.start_hour is None:
            return DisponibilidadeCheckin(True, MSG_DISPONIVEL)

        abre = checkin_opens_at(janela.start_hour)
        if local.time() < abre:
            return DisponibilidadeCheckin(
                False,
                MSG_ANTES_DA_JANELA.format(hora=abre.strftime("%H:%M")),
                datetime.combine(hoje, abre, tzinfo=tzinfo),
            )
        if local.time() > CHECKIN_FECHA:
            return DisponibilidadeCheckin(False, MSG_ENCERRADO)

        return DisponibilidadeCheckin(True, MSG_DISPONIVEL)
    except Exception:
        logger.exception("Falha ao avaliar janela de check-in para %r; liberando", schedule)
        return DisponibilidadeCheckin(True, MSG_DISPONIVEL)
