from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from academia import auth, database
from academia.models.conquista import Conquista
from academia.schemas.conquista import ConquistaRead

router = APIRouter(
    prefix="/api/v1/conquistas",
    tags=["Conquistas"],
    dependencies=[Depends(auth.get_current_active_user)]
)

@router.get("", response_model=List[ConquistaRead])
def read_conquistas(db: Session = Depends(database.get_db)):
    """
    Catálogo de conquistas ativas, da mais fácil para a mais difícil.
    """
    return db.query(Conquista).filter(Conquista.ativa == True).order_by(
        Conquista.categoria, Conquista.valor_requisito
    ).all()
