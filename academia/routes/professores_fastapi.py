# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o cadastro de Professores (instrutores).
"""

from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from academia.auth import get_admin_or_instrutor, get_admin_user
from academia.database import get_db
from academia.models.professor import Professor
from academia.schemas.professor import ProfessorCreate, ProfessorRead, ProfessorUpdate

router = APIRouter(
    prefix="/api/v1/professores",
    tags=["Professores"],
    responses={404: {"description": "Professor não encontrado"}},
)

@router.post("", response_model=ProfessorRead, status_code=status.HTTP_201_CREATED,
             dependencies=[Depends(get_admin_user)])
def create_professor(professor: ProfessorCreate, db: Session = Depends(get_db)):
    if professor.email and db.query(Professor).filter(Professor.email == professor.email).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email já cadastrado para outro professor")
    db_professor = Professor(**professor.model_dump())
    db.add(db_professor)
    db.commit()
    db.refresh(db_professor)
    return db_professor

@router.get("", response_model=List[ProfessorRead], dependencies=[Depends(get_admin_or_instrutor)])
def read_professores(db: Session = Depends(get_db)):
    return db.query(Professor).order_by(Professor.nome).all()

@router.get("/{professor_id}", response_model=ProfessorRead, dependencies=[Depends(get_admin_or_instrutor)])
def read_professor(professor_id: int, db: Session = Depends(get_db)):
    db_professor = db.query(Professor).filter(Professor.id == professor_id).first()
    if db_professor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professor não encontrado")
    return db_professor

@router.put("/{professor_id}", response_model=ProfessorRead, dependencies=[Depends(get_admin_user)])
def update_professor(professor_id: int, professor: ProfessorUpdate, db: Session = Depends(get_db)):
    db_professor = db.query(Professor).filter(Professor.id == professor_id).first()
    if db_professor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professor não encontrado")
    for key, value in professor.model_dump(exclude_unset=True).items():
        setattr(db_professor, key, value)
    db.commit()
    db.refresh(db_professor)
    return db_professor

@router.delete("/{professor_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(get_admin_user)])
def delete_professor(professor_id: int, db: Session = Depends(get_db)):
    db_professor = db.query(Professor).filter(Professor.id == professor_id).first()
    if db_professor is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Professor não encontrado")
    # Turmas do professor continuam existindo, sem professor
    for turma in db_professor.turmas:
        turma.professor_id = None
    db.delete(db_professor)
    db.commit()
    return None
