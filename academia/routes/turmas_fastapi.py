# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Turmas e de seus horários (subturmas).
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from academia.auth import get_admin_or_instrutor, get_current_active_user
from academia.database import get_db
from academia.models.matricula import Matricula
from academia.models.professor import Professor
from academia.models.turma import Turma, SubTurma
from academia.schemas.turma import (TurmaCreate, TurmaRead, TurmaUpdate,
                                    SubTurmaCreate, SubTurmaRead)

router = APIRouter(
    prefix="/api/v1/turmas",
    tags=["Turmas"],
    responses={404: {"description": "Não encontrado"}},
)


def turma_para_schema(turma: Turma) -> TurmaRead:
    turma_data = TurmaRead.model_validate(turma)
    horario = turma.horario_estruturado
    turma_data.dias = sorted(horario.dias) if horario else []
    turma_data.total_alunos = len(turma.matriculas)
    # Turma gratuita não gera receita, mesmo com alunos pagantes matriculados
    turma_data.valor_total = 0.0 if turma.gratuita else sum(
        m.aluno.mensalidade or 0.0 for m in turma.matriculas
    )
    turma_data.professor_nome = turma.professor.nome if turma.professor else None
    return turma_data


def _query_turmas(db: Session):
    return db.query(Turma).options(
        joinedload(Turma.matriculas).joinedload(Matricula.aluno),
        joinedload(Turma.professor),
        joinedload(Turma.subturmas)
    )


def _get_turma(db: Session, turma_id: int) -> Turma:
    db_turma = _query_turmas(db).filter(Turma.id == turma_id).first()
    if db_turma is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Turma não encontrada")
    return db_turma


def _valida_professor(db: Session, professor_id: Optional[int]):
    if professor_id and not db.query(Professor).filter(Professor.id == professor_id).first():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Professor com ID {professor_id} não encontrado")


# --- CRUD Endpoints ---

@router.post("", response_model=TurmaRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_or_instrutor)])
def create_turma(turma: TurmaCreate, db: Session = Depends(get_db)):
    """
    Cria uma nova turma. O texto do horário é convertido para dias da
    semana e horas ao salvar.
    """
    _valida_professor(db, turma.professor_id)

    db_turma = Turma(
        nome=turma.nome,
        professor_id=turma.professor_id,
        capacidade=turma.capacidade,
        gratuita=turma.gratuita,
        ativa=turma.ativa
    )
    db_turma.set_horario(turma.horario)
    db.add(db_turma)
    db.commit()
    return turma_para_schema(_get_turma(db, db_turma.id))

@router.get("", response_model=List[TurmaRead])
def read_turmas(
    skip: int = 0,
    limit: int = 100,
    professor_id: Optional[int] = None,
    ativa: Optional[bool] = None,
    db: Session = Depends(get_db),
    current_user=Depends(get_current_active_user)
):
    """
    Lista turmas com a contagem de alunos e o valor total das mensalidades.
    """
    query = _query_turmas(db)
    if professor_id:
        query = query.filter(Turma.professor_id == professor_id)
    if ativa is not None:
        query = query.filter(Turma.ativa == ativa)

    turmas = query.order_by(Turma.nome).offset(skip).limit(limit).all()
    return [turma_para_schema(t) for t in turmas]

@router.get("/{turma_id}", response_model=TurmaRead)
def read_turma(turma_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_active_user)):
    return turma_para_schema(_get_turma(db, turma_id))

@router.put("/{turma_id}", response_model=TurmaRead, dependencies=[Depends(get_admin_or_instrutor)])
def update_turma(
    turma_id: int,
    turma_update: TurmaUpdate,
    db: Session = Depends(get_db)
):
    db_turma = _get_turma(db, turma_id)

    update_data = turma_update.model_dump(exclude_unset=True)
    if "professor_id" in update_data:
        _valida_professor(db, update_data["professor_id"])

    horario = update_data.pop("horario", None)
    if horario is not None:
        db_turma.set_horario(horario)

    for key, value in update_data.items():
        setattr(db_turma, key, value)

    db.commit()
    db.expire_all()
    return turma_para_schema(_get_turma(db, turma_id))

@router.delete("/{turma_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_admin_or_instrutor)])
def delete_turma(turma_id: int, db: Session = Depends(get_db)):
    db_turma = db.query(Turma).filter(Turma.id == turma_id).first()
    if db_turma is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Turma não encontrada")

    db.delete(db_turma)
    db.commit()
    return None

# --- Subturmas ---

@router.get("/{turma_id}/subturmas", response_model=List[SubTurmaRead])
def read_subturmas(turma_id: int, db: Session = Depends(get_db), current_user=Depends(get_current_active_user)):
    _get_turma(db, turma_id)
    return db.query(SubTurma).filter(SubTurma.turma_id == turma_id).order_by(SubTurma.nome).all()

@router.post("/{turma_id}/subturmas", response_model=SubTurmaRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_or_instrutor)])
def create_subturma(turma_id: int, subturma: SubTurmaCreate, db: Session = Depends(get_db)):
    _get_turma(db, turma_id)
    db_subturma = SubTurma(turma_id=turma_id, **subturma.model_dump())
    db.add(db_subturma)
    db.commit()
    db.refresh(db_subturma)
    return db_subturma

@router.delete("/{turma_id}/subturmas/{subturma_id}", status_code=status.HTTP_204_NO_CONTENT,
               dependencies=[Depends(get_admin_or_instrutor)])
def delete_subturma(turma_id: int, subturma_id: int, db: Session = Depends(get_db)):
    db_subturma = db.query(SubTurma).filter(SubTurma.id == subturma_id, SubTurma.turma_id == turma_id).first()
    if db_subturma is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subturma não encontrada")
    db.delete(db_subturma)
    db.commit()
    return None
