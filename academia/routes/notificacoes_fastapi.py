from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from academia import auth, database
from academia.models.aluno import Aluno
from academia.models.notificacao import Notificacao
from academia.schemas.notificacao import NotificacaoRead

router = APIRouter(
    prefix="/api/v1/notificacoes",
    tags=["Notificações"]
)


def _notificacao_para_schema(notificacao: Notificacao) -> NotificacaoRead:
    notificacao_data = NotificacaoRead.model_validate(notificacao)
    notificacao_data.remetente_nome = notificacao.remetente.nome if notificacao.remetente else None
    return notificacao_data

@router.get("", response_model=List[NotificacaoRead])
def read_notificacoes(
    limit: int = 50,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    notificacoes = db.query(Notificacao).options(joinedload(Notificacao.remetente)).filter(
        Notificacao.aluno_id == aluno.id
    ).order_by(Notificacao.criada_em.desc(), Notificacao.id.desc()).limit(limit).all()
    return [_notificacao_para_schema(n) for n in notificacoes]

@router.get("/nao-lidas")
def count_nao_lidas(aluno: Aluno = Depends(auth.get_current_aluno), db: Session = Depends(database.get_db)):
    total = db.query(func.count(Notificacao.id)).filter(
        Notificacao.aluno_id == aluno.id, Notificacao.lida == False
    ).scalar()
    return {"nao_lidas": total or 0}

@router.post("/{notificacao_id}/lida", response_model=NotificacaoRead)
def marcar_lida(
    notificacao_id: int,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    notificacao = db.query(Notificacao).filter(
        Notificacao.id == notificacao_id, Notificacao.aluno_id == aluno.id
    ).first()
    if not notificacao:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Notificação não encontrada")
    notificacao.lida = True
    db.commit()
    db.refresh(notificacao)
    return _notificacao_para_schema(notificacao)

@router.post("/lidas")
def marcar_todas_lidas(aluno: Aluno = Depends(auth.get_current_aluno), db: Session = Depends(database.get_db)):
    atualizadas = db.query(Notificacao).filter(
        Notificacao.aluno_id == aluno.id, Notificacao.lida == False
    ).update({Notificacao.lida: True}, synchronize_session=False)
    db.commit()
    return {"atualizadas": atualizadas}
