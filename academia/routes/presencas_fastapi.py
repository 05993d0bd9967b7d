# -*- coding: utf-8 -*-
"""
Rotas FastAPI para consulta de presenças (check-ins) pela equipe.
"""

from datetime import datetime, timedelta
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from academia.auth import get_admin_or_instrutor
from academia.config import reference_tz
from academia.database import get_db
from academia.models.presenca import Presenca
from academia.schemas.presenca import PresencaListagem, PresencaRead

router = APIRouter(
    prefix="/api/v1/presencas",
    tags=["Presenças"],
    dependencies=[Depends(get_admin_or_instrutor)]
)


def presenca_para_schema(presenca: Presenca) -> PresencaRead:
    presenca_data = PresencaRead.model_validate(presenca)
    presenca_data.aluno_nome = presenca.aluno.nome
    presenca_data.turma_nome = presenca.turma.nome
    presenca_data.turma_horario = presenca.turma.horario
    return presenca_data


@router.get("", response_model=PresencaListagem)
def read_presencas(
    turma_id: Optional[int] = None,
    aluno_id: Optional[int] = None,
    limit: int = 100,
    db: Session = Depends(get_db)
):
    """
    Últimos check-ins, com os totais de hoje e dos últimos 7 dias
    (dias contados no fuso da academia).
    """
    hoje = datetime.now(reference_tz()).date()

    filtros = []
    if turma_id:
        filtros.append(Presenca.turma_id == turma_id)
    if aluno_id:
        filtros.append(Presenca.aluno_id == aluno_id)

    registros = db.query(Presenca).options(
        joinedload(Presenca.aluno), joinedload(Presenca.turma)
    ).filter(*filtros).order_by(Presenca.registrado_em.desc(), Presenca.id.desc()).limit(limit).all()

    def _contar(*extra):
        return db.query(func.count(Presenca.id)).filter(*filtros, *extra).scalar() or 0

    return PresencaListagem(
        total=_contar(),
        hoje=_contar(Presenca.data_presenca == hoje),
        ultimos_7_dias=_contar(Presenca.data_presenca > hoje - timedelta(days=7)),
        registros=[presenca_para_schema(p) for p in registros],
    )
