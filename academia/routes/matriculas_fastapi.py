# -*- coding: utf-8 -*-
"""
Rotas FastAPI para matrículas e para as solicitações de matrícula feitas
pelos alunos no portal.
"""

import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload

from academia.auth import get_admin_or_instrutor
from academia.database import get_db
from academia.models.aluno import Aluno
from academia.models.matricula import Matricula, SolicitacaoMatricula
from academia.models.turma import Turma
from academia.schemas.matricula import MatriculaCreate, MatriculaRead, SolicitacaoRead

router = APIRouter(
    prefix="/api/v1/matriculas",
    tags=["Matrículas"],
    dependencies=[Depends(get_admin_or_instrutor)]
)

solicitacoes_router = APIRouter(
    prefix="/api/v1/solicitacoes",
    tags=["Solicitações de Matrícula"],
    dependencies=[Depends(get_admin_or_instrutor)]
)


def matricula_para_schema(matricula: Matricula) -> MatriculaRead:
    matricula_data = MatriculaRead.model_validate(matricula)
    matricula_data.turma_nome = matricula.turma.nome
    matricula_data.turma_horario = matricula.turma.horario
    return matricula_data


def solicitacao_para_schema(solicitacao: SolicitacaoMatricula) -> SolicitacaoRead:
    solicitacao_data = SolicitacaoRead.model_validate(solicitacao)
    solicitacao_data.aluno_nome = solicitacao.aluno.nome
    solicitacao_data.turma_nome = solicitacao.turma.nome if solicitacao.turma else None
    return solicitacao_data


@router.post("", response_model=MatriculaRead, status_code=status.HTTP_201_CREATED)
def create_matricula(matricula: MatriculaCreate, db: Session = Depends(get_db)):
    if not db.query(Aluno).filter(Aluno.id == matricula.aluno_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aluno não encontrado")
    if not db.query(Turma).filter(Turma.id == matricula.turma_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Turma não encontrada")

    existente = db.query(Matricula).filter(
        Matricula.aluno_id == matricula.aluno_id,
        Matricula.turma_id == matricula.turma_id
    ).first()
    if existente:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Aluno já matriculado nesta turma")

    db_matricula = Matricula(aluno_id=matricula.aluno_id, turma_id=matricula.turma_id)
    db.add(db_matricula)
    db.commit()
    db.refresh(db_matricula)
    return matricula_para_schema(db_matricula)

@router.get("", response_model=List[MatriculaRead])
def read_matriculas(
    aluno_id: Optional[int] = None,
    turma_id: Optional[int] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Matricula).options(joinedload(Matricula.turma))
    if aluno_id:
        query = query.filter(Matricula.aluno_id == aluno_id)
    if turma_id:
        query = query.filter(Matricula.turma_id == turma_id)
    return [matricula_para_schema(m) for m in query.order_by(Matricula.data_matricula.desc()).all()]

@router.delete("/{matricula_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_matricula(matricula_id: int, db: Session = Depends(get_db)):
    db_matricula = db.query(Matricula).filter(Matricula.id == matricula_id).first()
    if not db_matricula:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Matrícula não encontrada")
    db.delete(db_matricula)
    db.commit()
    return None


# --- Solicitações ---

def _get_solicitacao_pendente(db: Session, solicitacao_id: int) -> SolicitacaoMatricula:
    solicitacao = db.query(SolicitacaoMatricula).filter(SolicitacaoMatricula.id == solicitacao_id).first()
    if not solicitacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Solicitação não encontrada")
    if solicitacao.status != "pendente":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Solicitação já {solicitacao.status}")
    return solicitacao

@solicitacoes_router.get("", response_model=List[SolicitacaoRead])
def read_solicitacoes(status_filtro: Optional[str] = Query("pendente", alias="status"), db: Session = Depends(get_db)):
    query = db.query(SolicitacaoMatricula).options(
        joinedload(SolicitacaoMatricula.aluno),
        joinedload(SolicitacaoMatricula.turma)
    )
    if status_filtro:
        query = query.filter(SolicitacaoMatricula.status == status_filtro)
    return [solicitacao_para_schema(s) for s in query.order_by(SolicitacaoMatricula.criada_em.asc()).all()]

@solicitacoes_router.post("/{solicitacao_id}/aprovar", response_model=SolicitacaoRead)
def aprovar_solicitacao(solicitacao_id: int, db: Session = Depends(get_db)):
    """
    Aprova a solicitação e cria a matrícula correspondente.
    """
    solicitacao = _get_solicitacao_pendente(db, solicitacao_id)

    ja_matriculado = db.query(Matricula).filter(
        Matricula.aluno_id == solicitacao.aluno_id,
        Matricula.turma_id == solicitacao.turma_id
    ).first()
    if not ja_matriculado:
        db.add(Matricula(aluno_id=solicitacao.aluno_id, turma_id=solicitacao.turma_id))

    solicitacao.status = "aprovada"
    solicitacao.revisada_em = datetime.utcnow()
    db.commit()
    db.refresh(solicitacao)
    logging.info(f"Solicitação {solicitacao_id} aprovada (aluno {solicitacao.aluno_id}, turma {solicitacao.turma_id})")
    return solicitacao_para_schema(solicitacao)

@solicitacoes_router.post("/{solicitacao_id}/rejeitar", response_model=SolicitacaoRead)
def rejeitar_solicitacao(solicitacao_id: int, db: Session = Depends(get_db)):
    solicitacao = _get_solicitacao_pendente(db, solicitacao_id)
    solicitacao.status = "rejeitada"
    solicitacao.revisada_em = datetime.utcnow()
    db.commit()
    db.refresh(solicitacao)
    return solicitacao_para_schema(solicitacao)
