# -*- coding: utf-8 -*-
"""
Relatórios da administração (financeiro, turmas, retenção e engajamento) e
do instrutor (risco de evasão dos alunos das suas turmas).
"""

from collections import OrderedDict, defaultdict
from datetime import datetime, time, timedelta

from dateutil.relativedelta import relativedelta
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from academia.auth import get_admin_or_instrutor, get_admin_user
from academia.config import reference_tz
from academia.database import get_db
from academia.models.aluno import Aluno
from academia.models.matricula import Matricula
from academia.models.presenca import Presenca
from academia.models.professor import Professor
from academia.models.turma import Turma
from academia.models.usuario import Usuario
from academia.ranking import week_bounds
from academia.reports import (FAIXAS_ENGAJAMENTO, attendance_rate, due_within, engagement_bucket,
                              next_payment_date, risk_level)

router = APIRouter(
    tags=["Relatórios"],
    prefix="/api/v1/relatorios"
)

JANELA_DIAS = 30


@router.get("/admin", dependencies=[Depends(get_admin_user)])
def relatorio_admin(db: Session = Depends(get_db)):
    hoje = datetime.now(reference_tz()).date()
    inicio_janela = hoje - timedelta(days=JANELA_DIAS)

    # --- Financeiro ---
    alunos_ativos = db.query(Aluno).filter(Aluno.ativo == True).all()
    receita_mensal = sum(a.mensalidade or 0.0 for a in alunos_ativos)
    pagantes = [a for a in alunos_ativos if (a.mensalidade or 0.0) > 0]
    vencimentos = [
        {
            "aluno_id": a.id,
            "nome": a.nome,
            "mensalidade": a.mensalidade,
            "proximo_vencimento": next_payment_date(a.dia_vencimento, hoje),
        }
        for a in alunos_ativos if due_within(a.dia_vencimento, hoje)
    ]
    vencimentos.sort(key=lambda v: v["proximo_vencimento"])

    # --- Desempenho das turmas ---
    checkins_por_turma = dict(
        db.query(Presenca.turma_id, func.count(Presenca.id))
        .filter(Presenca.data_presenca > inicio_janela)
        .group_by(Presenca.turma_id).all()
    )
    turmas = db.query(Turma).options(joinedload(Turma.matriculas)).filter(Turma.ativa == True).all()
    desempenho = []
    for turma in turmas:
        total_alunos = len(turma.matriculas)
        checkins = checkins_por_turma.get(turma.id, 0)
        desempenho.append({
            "turma_id": turma.id,
            "nome": turma.nome,
            "alunos": total_alunos,
            "checkins_30_dias": checkins,
            "taxa_presenca": attendance_rate(checkins, total_alunos),
        })
    desempenho.sort(key=lambda t: t["taxa_presenca"], reverse=True)

    # --- Retenção (últimos 6 meses) ---
    retencao = []
    inicio_mes_atual = hoje.replace(day=1)
    for i in range(5, -1, -1):
        inicio_mes = inicio_mes_atual - relativedelta(months=i)
        fim_mes = inicio_mes + relativedelta(months=1)
        novos = db.query(func.count(Aluno.id)).filter(
            Aluno.data_cadastro >= datetime.combine(inicio_mes, time.min),
            Aluno.data_cadastro < datetime.combine(fim_mes, time.min)
        ).scalar() or 0
        cadastrados = db.query(func.count(Aluno.id)).filter(
            Aluno.data_cadastro < datetime.combine(fim_mes, time.min)
        ).scalar() or 0
        ativos = db.query(func.count(func.distinct(Presenca.aluno_id))).filter(
            Presenca.data_presenca >= inicio_mes,
            Presenca.data_presenca < fim_mes
        ).scalar() or 0
        retencao.append({
            "mes": inicio_mes.strftime("%m/%Y"),
            "novos": novos,
            "ativos": ativos,
            "inativos": max(cadastrados - ativos, 0),
        })

    # --- Engajamento ---
    checkins_por_aluno = dict(
        db.query(Presenca.aluno_id, func.count(Presenca.id))
        .filter(Presenca.data_presenca > inicio_janela)
        .group_by(Presenca.aluno_id).all()
    )
    engajamento = OrderedDict((rotulo, 0) for _, rotulo in FAIXAS_ENGAJAMENTO)
    for aluno in alunos_ativos:
        engajamento[engagement_bucket(checkins_por_aluno.get(aluno.id, 0))] += 1

    return {
        "financeiro": {
            "receita_mensal": round(receita_mensal, 2),
            "alunos_ativos": len(alunos_ativos),
            "ticket_medio": round(receita_mensal / len(pagantes), 2) if pagantes else 0.0,
            "vencimentos_proximos": vencimentos,
        },
        "turmas": desempenho,
        "retencao": retencao,
        "engajamento": engajamento,
    }


@router.get("/instrutor")
def relatorio_instrutor(
    current_user: Usuario = Depends(get_admin_or_instrutor),
    db: Session = Depends(get_db)
):
    """
    Alunos das turmas do instrutor com a frequência dos últimos 30 dias e o
    risco de evasão. O administrador vê todas as turmas.
    """
    hoje = datetime.now(reference_tz()).date()
    inicio_janela = hoje - timedelta(days=JANELA_DIAS)

    query = db.query(Turma).options(joinedload(Turma.matriculas).joinedload(Matricula.aluno))
    if current_user.role == "instrutor":
        professor = db.query(Professor).filter(Professor.usuario_id == current_user.id).first()
        if professor is None:
            return {"resumo": {"total_alunos": 0, "alunos_em_risco": 0, "checkins_30_dias": 0},
                    "alunos": [], "turmas": [], "tendencia": []}
        query = query.filter(Turma.professor_id == professor.id)
    turmas = query.filter(Turma.ativa == True).order_by(Turma.nome).all()
    turma_ids = [t.id for t in turmas]

    presencas = db.query(Presenca.aluno_id, Presenca.turma_id).filter(
        Presenca.turma_id.in_(turma_ids),
        Presenca.data_presenca > inicio_janela
    ).all()
    checkins_aluno = defaultdict(int)
    checkins_turma = defaultdict(int)
    for aluno_id, turma_id in presencas:
        checkins_aluno[aluno_id] += 1
        checkins_turma[turma_id] += 1

    ultima_presenca = dict(
        db.query(Presenca.aluno_id, func.max(Presenca.data_presenca))
        .filter(Presenca.turma_id.in_(turma_ids))
        .group_by(Presenca.aluno_id).all()
    )

    alunos = OrderedDict()
    for turma in turmas:
        for matricula in turma.matriculas:
            alunos.setdefault(matricula.aluno.id, {"aluno": matricula.aluno, "turmas": []})
            alunos[matricula.aluno.id]["turmas"].append(turma.nome)

    linhas_alunos = []
    for aluno_id, dados in alunos.items():
        checkins = checkins_aluno.get(aluno_id, 0)
        ultima = ultima_presenca.get(aluno_id)
        dias_desde = (hoje - ultima).days if ultima else None
        taxa = attendance_rate(checkins)
        linhas_alunos.append({
            "aluno_id": aluno_id,
            "nome": dados["aluno"].nome,
            "turmas": dados["turmas"],
            "checkins_30_dias": checkins,
            "ultimo_checkin": ultima,
            "dias_sem_treinar": dias_desde,
            "taxa_presenca": taxa,
            "risco": risk_level(dias_desde, taxa),
        })
    ordem_risco = {"alto": 0, "medio": 1, "baixo": 2}
    linhas_alunos.sort(key=lambda a: (ordem_risco[a["risco"]], a["nome"]))

    linhas_turmas = []
    for turma in turmas:
        total_alunos = len(turma.matriculas)
        checkins = checkins_turma.get(turma.id, 0)
        linhas_turmas.append({
            "turma_id": turma.id,
            "nome": turma.nome,
            "alunos": total_alunos,
            "checkins_30_dias": checkins,
            "media_por_aluno": round(checkins / total_alunos, 1) if total_alunos else 0.0,
            "taxa_presenca": attendance_rate(checkins, total_alunos),
        })

    # --- Tendência das últimas 8 semanas ---
    segunda_atual, _ = week_bounds(hoje)
    tendencia = []
    for i in range(7, -1, -1):
        inicio = segunda_atual - timedelta(weeks=i)
        total = db.query(func.count(Presenca.id)).filter(
            Presenca.turma_id.in_(turma_ids),
            Presenca.data_presenca >= inicio,
            Presenca.data_presenca < inicio + timedelta(days=7)
        ).scalar() or 0
        tendencia.append({"semana": inicio.strftime("%d/%m"), "checkins": total})

    return {
        "resumo": {
            "total_alunos": len(linhas_alunos),
            "alunos_em_risco": sum(1 for a in linhas_alunos if a["risco"] == "alto"),
            "checkins_30_dias": len(presencas),
        },
        "alunos": linhas_alunos,
        "turmas": linhas_turmas,
        "tendencia": tendencia,
    }
