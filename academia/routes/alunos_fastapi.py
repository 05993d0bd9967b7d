# -*- coding: utf-8 -*-
"""
Rotas FastAPI para o CRUD de Alunos.
"""
import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from academia import auth, repository, storage
from academia.config import reference_tz
from academia.database import get_db
from academia.image_utils import process_avatar_image
from academia.models.aluno import Aluno
from academia.models.usuario import Usuario
from academia.ranking import calculate_default_weekly_goal
from academia.reports import next_payment_date
from academia.schemas.aluno import AlunoCreate, AlunoRead, AlunoUpdate


router = APIRouter(
    prefix="/api/v1/alunos",
    tags=["Alunos"],
    responses={404: {"description": "Aluno não encontrado"}},
    dependencies=[Depends(auth.get_admin_or_instrutor)]
)


def aluno_para_schema(db: Session, aluno: Aluno) -> AlunoRead:
    """AlunoRead com o próximo vencimento e a meta semanal efetiva."""
    hoje = datetime.now(reference_tz()).date()
    aluno_data = AlunoRead.model_validate(aluno)
    aluno_data.proximo_vencimento = next_payment_date(aluno.dia_vencimento, hoje)
    aluno_data.meta_semanal_efetiva = aluno.meta_semanal or calculate_default_weekly_goal(
        repository.list_enrollments(db, aluno.id)
    )
    return aluno_data


def salvar_avatar(db: Session, aluno: Aluno, foto: UploadFile):
    """Processa a foto com Pillow, envia ao bucket e grava a URL no aluno."""
    processed_image, mime_type = process_avatar_image(foto.file)
    if not processed_image:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Arquivo de imagem inválido.")
    key = f"avatars/aluno_{aluno.id}_{int(datetime.utcnow().timestamp())}.jpg"
    try:
        aluno.avatar_url = storage.upload_image(processed_image, key, mime_type)
    except storage.StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    db.commit()
    db.refresh(aluno)


def _commit_aluno(db: Session):
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Erro de integridade ao salvar aluno: {e}")
        if repository.is_unique_violation(e):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email ou usuário já vinculado a outro aluno.")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erro interno ao salvar dados.")


@router.post("", response_model=AlunoRead, status_code=status.HTTP_201_CREATED)
def create_aluno(aluno: AlunoCreate, db: Session = Depends(get_db)):
    if aluno.usuario_id is not None:
        db_user = db.query(Usuario).filter(Usuario.id == aluno.usuario_id).first()
        if not db_user:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Usuário não encontrado")
        if db_user.role != "aluno":
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="O usuário vinculado precisa ter o papel 'aluno'.")

    db_aluno = Aluno(**aluno.model_dump())
    db.add(db_aluno)
    _commit_aluno(db)
    db.refresh(db_aluno)
    return aluno_para_schema(db, db_aluno)

@router.get("", response_model=List[AlunoRead])
def read_alunos(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    ativo: Optional[bool] = None,
    db: Session = Depends(get_db)
):
    query = db.query(Aluno)
    if search:
        query = query.filter(Aluno.nome.ilike(f"%{search}%"))
    if ativo is not None:
        query = query.filter(Aluno.ativo == ativo)
    alunos = query.order_by(Aluno.nome).offset(skip).limit(limit).all()
    return [aluno_para_schema(db, a) for a in alunos]

@router.get("/{aluno_id}", response_model=AlunoRead)
def read_aluno(aluno_id: int, db: Session = Depends(get_db)):
    db_aluno = db.query(Aluno).filter(Aluno.id == aluno_id).first()
    if db_aluno is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aluno não encontrado")
    return aluno_para_schema(db, db_aluno)

@router.put("/{aluno_id}", response_model=AlunoRead)
def update_aluno(aluno_id: int, aluno: AlunoUpdate, db: Session = Depends(get_db)):
    db_aluno = db.query(Aluno).filter(Aluno.id == aluno_id).first()
    if not db_aluno:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aluno não encontrado")

    for key, value in aluno.model_dump(exclude_unset=True).items():
        setattr(db_aluno, key, value)

    _commit_aluno(db)
    db.refresh(db_aluno)
    return aluno_para_schema(db, db_aluno)

@router.post("/{aluno_id}/avatar", response_model=AlunoRead)
def upload_avatar_aluno(aluno_id: int, foto: UploadFile = File(...), db: Session = Depends(get_db)):
    db_aluno = db.query(Aluno).filter(Aluno.id == aluno_id).first()
    if not db_aluno:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aluno não encontrado")
    salvar_avatar(db, db_aluno, foto)
    return aluno_para_schema(db, db_aluno)

@router.delete("/{aluno_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_aluno(aluno_id: int, db: Session = Depends(get_db)):
    db_aluno = db.query(Aluno).filter(Aluno.id == aluno_id).first()
    if not db_aluno:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Aluno não encontrado")
    db.delete(db_aluno)
    db.commit()
    return None
