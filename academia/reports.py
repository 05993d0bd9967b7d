# -*- coding: utf-8 -*-
"""
Regras dos relatórios de administração e de instrutor.
"""

import calendar
from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

# Dias de treino esperados por aluno em uma janela de 30 dias
DIAS_TREINO_ESPERADOS = 12

FAIXAS_ENGAJAMENTO = [
    (12, "Muito Ativo (12+)"),
    (8, "Ativo (8-11)"),
    (4, "Moderado (4-7)"),
    (0, "Baixo (<4)"),
]


def engagement_bucket(checkins_30_dias: int) -> str:
    for minimo, rotulo in FAIXAS_ENGAJAMENTO:
        if checkins_30_dias >= minimo:
            return rotulo
    return FAIXAS_ENGAJAMENTO[-1][1]


def attendance_rate(total_checkins: int, total_alunos: int = 1) -> int:
    esperados = total_alunos * DIAS_TREINO_ESPERADOS
    if esperados <= 0:
        return 0
    return round(total_checkins / esperados * 100)


def risk_level(dias_desde_checkin: Optional[int], taxa_presenca: float) -> str:
    """Risco de evasão: alto, medio ou baixo."""
    if dias_desde_checkin is None or dias_desde_checkin > 14:
        return "alto"
    if dias_desde_checkin > 7 or taxa_presenca < 50:
        return "medio"
    return "baixo"


def next_payment_date(dia_vencimento: Optional[int], hoje: date) -> Optional[date]:
    """
    Próximo vencimento da mensalidade: o dia de vencimento deste mês ou, se já
    passou, o do mês seguinte. Dia 31 em mês curto cai no último dia do mês.
    """
    if not dia_vencimento:
        return None

    def _no_mes(referencia):
        ultimo_dia = calendar.monthrange(referencia.year, referencia.month)[1]
        return referencia.replace(day=min(dia_vencimento, ultimo_dia))

    vencimento = _no_mes(hoje.replace(day=1))
    if vencimento < hoje:
        vencimento = _no_mes(hoje.replace(day=1) + relativedelta(months=1))
    return vencimento


def due_within(dia_vencimento: Optional[int], hoje: date, dias: int = 7) -> bool:
    """Vencimento nos próximos `dias` dias do mês corrente (possível inadimplência)."""
    if not dia_vencimento:
        return False
    faltam = dia_vencimento - hoje.day
    return 0 <= faltam <= dias
