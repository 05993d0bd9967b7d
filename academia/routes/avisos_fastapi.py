# academia/routes/avisos_fastapi.py
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from academia import auth
from academia.database import get_db
from academia.models.aviso import Aviso
from academia.models.turma import Turma
from academia.models.usuario import Usuario
from academia.schemas.aviso import AvisoCreate, AvisoRead, AvisoUpdate

router = APIRouter(
    tags=["Avisos"],
    prefix="/api/v1/avisos"
)

def _valida_turma(db: Session, turma_id: Optional[int]):
    if turma_id and not db.query(Turma).filter(Turma.id == turma_id).first():
        raise HTTPException(status_code=404, detail="Turma não encontrada")

@router.post("", response_model=AvisoRead, status_code=status.HTTP_201_CREATED)
def create_aviso(
    aviso: AvisoCreate,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(auth.get_admin_or_instrutor)
):
    _valida_turma(db, aviso.turma_id)
    db_aviso = Aviso(**aviso.model_dump(), autor_id=current_user.id)
    db.add(db_aviso)
    db.commit()
    db.refresh(db_aviso)
    return db_aviso

@router.get("", response_model=List[AvisoRead])
def read_avisos(
    turma_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: Usuario = Depends(auth.get_current_active_user)
):
    query = db.query(Aviso)
    # Alunos só veem avisos publicados
    if current_user.role == "aluno":
        query = query.filter(Aviso.publicado == True)
    if turma_id:
        query = query.filter((Aviso.turma_id == turma_id) | (Aviso.turma_id == None))
    return query.order_by(Aviso.criado_em.desc(), Aviso.id.desc()).all()

@router.put("/{aviso_id}", response_model=AvisoRead, dependencies=[Depends(auth.get_admin_or_instrutor)])
def update_aviso(aviso_id: int, aviso: AvisoUpdate, db: Session = Depends(get_db)):
    db_aviso = db.query(Aviso).filter(Aviso.id == aviso_id).first()
    if db_aviso is None:
        raise HTTPException(status_code=404, detail="Aviso não encontrado")

    update_data = aviso.model_dump(exclude_unset=True)
    if "turma_id" in update_data:
        _valida_turma(db, update_data["turma_id"])
    for key, value in update_data.items():
        setattr(db_aviso, key, value)

    db.commit()
    db.refresh(db_aviso)
    return db_aviso

@router.delete("/{aviso_id}", status_code=status.HTTP_204_NO_CONTENT, dependencies=[Depends(auth.get_admin_or_instrutor)])
def delete_aviso(aviso_id: int, db: Session = Depends(get_db)):
    db_aviso = db.query(Aviso).filter(Aviso.id == aviso_id).first()
    if db_aviso is None:
        raise HTTPException(status_code=404, detail="Aviso não encontrado")
    db.delete(db_aviso)
    db.commit()
    return None
