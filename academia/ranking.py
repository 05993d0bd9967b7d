# -*- coding: utf-8 -*-
"""
Ranking semanal, progresso da meta semanal e meta padrão do aluno.

Funções puras sobre registros já carregados do banco: não consultam nada,
não guardam estado.
"""

from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from dateutil import tz

from academia.checkin import NOMES_DIAS_PT

PONTUACAO_PADRAO = {"checkin": 2, "post": 1}

META_SEMANAL_FALLBACK = 3


@dataclass
class PosicaoRanking:
    aluno_id: int
    score: int = 0
    checkin_count: int = 0
    post_count: int = 0


@dataclass
class ProgressoSemanal:
    inicio_semana: date
    meta: int
    total: int
    percentual: float
    meta_atingida: bool
    dias: "OrderedDict[date, bool]" = field(default_factory=OrderedDict)


def _aluno_id(registro):
    if isinstance(registro, dict):
        return registro["aluno_id"]
    return registro.aluno_id


def rank_weekly(presencas: Iterable, posts: Iterable, pontuacao: Dict[str, int] = None,
                limite: Optional[int] = None) -> List[PosicaoRanking]:
    """
    Soma os pontos da semana por aluno e ordena do maior para o menor.

    Posts são contados antes dos check-ins; alunos empatados ficam na ordem em
    que apareceram pela primeira vez (a ordenação do Python é estável).
    """
    pontuacao = {**PONTUACAO_PADRAO, **(pontuacao or {})}
    placar: "OrderedDict[int, PosicaoRanking]" = OrderedDict()

    def _posicao(aluno_id):
        if aluno_id not in placar:
            placar[aluno_id] = PosicaoRanking(aluno_id=aluno_id)
        return placar[aluno_id]

    for post in posts:
        posicao = _posicao(_aluno_id(post))
        posicao.post_count += 1
        posicao.score += pontuacao["post"]

    for presenca in presencas:
        posicao = _posicao(_aluno_id(presenca))
        posicao.checkin_count += 1
        posicao.score += pontuacao["checkin"]

    ranking = sorted(placar.values(), key=lambda p: p.score, reverse=True)
    if limite is not None:
        ranking = ranking[:limite]
    return ranking


def week_bounds(hoje: date) -> Tuple[date, date]:
    """Segunda-feira da semana de `hoje` e a segunda-feira seguinte."""
    segunda = hoje - timedelta(days=hoje.weekday())
    return segunda, segunda + timedelta(days=7)


def weekly_progress(instantes: Iterable[datetime], meta: int, hoje: date, tzinfo) -> ProgressoSemanal:
    """
    Monta o mapa dia a dia (segunda a domingo) dos check-ins da semana atual.

    Os instantes são convertidos para o fuso de referência antes de extrair a
    data; instantes sem fuso são tratados como UTC, que é como o banco grava.
    """
    segunda, proxima = week_bounds(hoje)
    dias = OrderedDict((segunda + timedelta(days=i), False) for i in range(7))

    total = 0
    for instante in instantes:
        if instante.tzinfo is None:
            instante = instante.replace(tzinfo=tz.UTC)
        dia = instante.astimezone(tzinfo).date()
        if segunda <= dia < proxima:
            total += 1
            dias[dia] = True

    meta = max(int(meta or META_SEMANAL_FALLBACK), 1)
    percentual = min(total / meta * 100, 100.0)
    return ProgressoSemanal(
        inicio_semana=segunda,
        meta=meta,
        total=total,
        percentual=round(percentual, 1),
        meta_atingida=total >= meta,
        dias=dias,
    )



def calculate_default_weekly_goal(matriculas: Iterable, nomes_dias=NOMES_DIAS_PT) -> int:
    """
    Meta semanal padrão: quantidade de dias da semana distintos em que o aluno
    tem aula, somando todas as turmas. Duas turmas na segunda contam uma vez.
    Sem nenhum dia reconhecido, a meta é 3.
    """
    dias = set()
    for matricula in matriculas:
        texto = matricula if isinstance(matricula, str) else getattr(matricula, "schedule", None)
        if not texto:
            continue
        texto = texto.lower()
        for dia, nomes in nomes_dias.items():
            if any(nome in texto for nome in nomes):
                dias.add(dia)
    return len(dias) or META_SEMANAL_FALLBACK
