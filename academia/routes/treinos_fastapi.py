# -*- coding: utf-8 -*-
"""
Rotas do feed de treinos: fotos dos alunos, reações, comentários e o
ranking semanal.
"""

import logging
from collections import Counter
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status, File, Form, UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from academia import auth, database, repository, storage
from academia.achievements import evaluate_achievements
from academia.config import reference_tz
from academia.image_utils import process_training_photo
from academia.models.aluno import Aluno
from academia.models.matricula import Matricula
from academia.models.notificacao import Notificacao
from academia.models.post_treino import PostTreino, Reacao, Comentario
from academia.models.turma import Turma
from academia.models.usuario import Usuario
from academia.ranking import rank_weekly, week_bounds
from academia.schemas.post_treino import (ComentarioCreate, ComentarioRead, PostRead,
                                          PosicaoRankingRead, ReacaoCreate, ReacaoResult)

MSG_POST_DUPLICADO = "Você já postou uma foto para este dia!"
TAMANHO_RANKING = 10

router = APIRouter(
    prefix="/api/v1/treinos",
    tags=["Feed de Treinos"]
)


def _aluno_do_usuario(db: Session, usuario: Usuario) -> Optional[Aluno]:
    if usuario.role != "aluno":
        return None
    return db.query(Aluno).filter(Aluno.usuario_id == usuario.id).first()


def _get_post(db: Session, post_id: int) -> PostTreino:
    post = db.query(PostTreino).filter(PostTreino.id == post_id).first()
    if not post:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post não encontrado")
    return post


def post_para_schema(post: PostTreino, aluno_logado_id: Optional[int] = None) -> PostRead:
    post_data = PostRead.model_validate(post)
    post_data.aluno_nome = post.aluno.nome
    post_data.aluno_avatar_url = post.aluno.avatar_url
    post_data.total_reacoes = len(post.reacoes)
    post_data.reacoes_resumo = dict(Counter(r.tipo for r in post.reacoes))
    post_data.total_comentarios = len(post.comentarios)
    if aluno_logado_id is not None:
        post_data.minha_reacao = next(
            (r.tipo for r in post.reacoes if r.aluno_id == aluno_logado_id), None
        )
    return post_data


def _notificar(db: Session, post: PostTreino, remetente_id: int, tipo: str,
               tipo_reacao: str = None, texto_comentario: str = None):
    # Ninguém é notificado da própria interação
    if post.aluno_id == remetente_id:
        return
    db.add(Notificacao(
        aluno_id=post.aluno_id,
        remetente_id=remetente_id,
        post_id=post.id,
        tipo=tipo,
        tipo_reacao=tipo_reacao,
        texto_comentario=texto_comentario[:500] if texto_comentario else None,
    ))


# --- Posts ---

@router.post("", response_model=PostRead, status_code=status.HTTP_201_CREATED)
def create_post(
    foto: UploadFile = File(...),
    legenda: Optional[str] = Form(None),
    data_treino: Optional[str] = Form(None),
    turma_id: Optional[int] = Form(None),
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    """
    Publica a foto do treino do dia. Um post por aluno por dia.
    """
    hoje = datetime.now(reference_tz()).date()
    dia = hoje
    if data_treino:
        try:
            dia = datetime.strptime(data_treino, '%Y-%m-%d').date()
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Data do treino inválida. Use AAAA-MM-DD.")
        if dia > hoje:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="A data do treino não pode estar no futuro.")

    if turma_id is not None:
        matricula = db.query(Matricula).join(Turma).filter(
            Matricula.aluno_id == aluno.id,
            Matricula.turma_id == turma_id,
            Turma.ativa == True
        ).first()
        if not matricula:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você não está matriculado nesta turma.")

    if db.query(PostTreino).filter(PostTreino.aluno_id == aluno.id, PostTreino.data_treino == dia).first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=MSG_POST_DUPLICADO)

    foto_processada, miniatura, mime_type = process_training_photo(foto.file)
    if not foto_processada:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Arquivo de imagem inválido.")

    base_key = f"treinos/aluno_{aluno.id}_{dia.isoformat()}_{int(datetime.utcnow().timestamp())}"
    try:
        foto_url = storage.upload_image(foto_processada, f"{base_key}.jpg", mime_type)
    except storage.StorageError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    try:
        thumbnail_url = storage.upload_image(miniatura, f"{base_key}_thumb.jpg", mime_type)
    except storage.StorageError as e:
        storage.delete_image(f"{base_key}.jpg")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    post = PostTreino(
        aluno_id=aluno.id,
        turma_id=turma_id,
        data_treino=dia,
        foto_url=foto_url,
        thumbnail_url=thumbnail_url,
        legenda=legenda.strip()[:500] if legenda else None,
    )
    db.add(post)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        # As fotos já foram enviadas e ficariam sem post
        for key in (f"{base_key}.jpg", f"{base_key}_thumb.jpg"):
            storage.delete_image(key)
        if repository.is_unique_violation(e):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=MSG_POST_DUPLICADO)
        logging.error(f"Erro de integridade ao salvar post do aluno {aluno.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erro ao salvar o post.")
    db.refresh(post)

    evaluate_achievements(db, aluno.id, hoje)
    return post_para_schema(_get_post(db, post.id), aluno.id)

@router.get("", response_model=List[PostRead])
def read_posts(
    limit: int = 50,
    aluno_id: Optional[int] = None,
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    """
    Feed com os posts mais recentes, com o resumo de reações e comentários.
    """
    query = db.query(PostTreino).options(
        joinedload(PostTreino.aluno),
        joinedload(PostTreino.reacoes),
        joinedload(PostTreino.comentarios)
    )
    if aluno_id:
        query = query.filter(PostTreino.aluno_id == aluno_id)
    posts = query.order_by(PostTreino.criado_em.desc(), PostTreino.id.desc()).limit(limit).all()

    aluno_logado = _aluno_do_usuario(db, current_user)
    aluno_logado_id = aluno_logado.id if aluno_logado else None
    return [post_para_schema(p, aluno_logado_id) for p in posts]

@router.get("/ranking-semanal", response_model=List[PosicaoRankingRead])
def read_ranking_semanal(
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    """
    Ranking da semana atual (segunda a domingo no fuso da academia):
    check-in vale 2 pontos e post de treino vale 1.
    """
    hoje = datetime.now(reference_tz()).date()
    inicio, fim = week_bounds(hoje)

    presencas = repository.list_week_attendance(db, inicio, fim)
    posts = repository.list_training_posts(db, inicio, fim)
    ranking = rank_weekly(presencas, posts, limite=TAMANHO_RANKING)

    alunos = {
        a.id: a for a in db.query(Aluno).filter(Aluno.id.in_([p.aluno_id for p in ranking])).all()
    }
    return [
        PosicaoRankingRead(
            posicao=indice,
            aluno_id=posicao.aluno_id,
            nome=alunos[posicao.aluno_id].nome if posicao.aluno_id in alunos else "Aluno",
            avatar_url=alunos[posicao.aluno_id].avatar_url if posicao.aluno_id in alunos else None,
            score=posicao.score,
            checkin_count=posicao.checkin_count,
            post_count=posicao.post_count,
        )
        for indice, posicao in enumerate(ranking, start=1)
    ]

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    post = _get_post(db, post_id)
    aluno_logado = _aluno_do_usuario(db, current_user)
    dono = aluno_logado is not None and aluno_logado.id == post.aluno_id
    if not dono and current_user.role != "administrador":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você só pode excluir os próprios posts.")
    db.delete(post)
    db.commit()
    return None


# --- Reações ---

@router.post("/{post_id}/reacoes", response_model=ReacaoResult)
def reagir_post(
    post_id: int,
    reacao: ReacaoCreate,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    """
    Alterna a reação do aluno no post: a mesma reação remove, outra troca.
    """
    post = _get_post(db, post_id)
    existente = db.query(Reacao).filter(Reacao.post_id == post.id, Reacao.aluno_id == aluno.id).first()

    if existente and existente.tipo == reacao.tipo:
        db.delete(existente)
        resultado = ReacaoResult(acao="removida")
    elif existente:
        existente.tipo = reacao.tipo
        resultado = ReacaoResult(acao="alterada", tipo=reacao.tipo)
    else:
        db.add(Reacao(post_id=post.id, aluno_id=aluno.id, tipo=reacao.tipo))
        _notificar(db, post, aluno.id, "reacao", tipo_reacao=reacao.tipo)
        resultado = ReacaoResult(acao="adicionada", tipo=reacao.tipo)

    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if repository.is_unique_violation(e):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Você já reagiu a este post.")
        raise
    return resultado


# --- Comentários ---

@router.get("/{post_id}/comentarios", response_model=List[ComentarioRead])
def read_comentarios(
    post_id: int,
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    _get_post(db, post_id)
    comentarios = db.query(Comentario).options(joinedload(Comentario.aluno)).filter(
        Comentario.post_id == post_id
    ).order_by(Comentario.criado_em.asc(), Comentario.id.asc()).all()
    return [_comentario_para_schema(c) for c in comentarios]

@router.post("/{post_id}/comentarios", response_model=ComentarioRead, status_code=status.HTTP_201_CREATED)
def create_comentario(
    post_id: int,
    comentario: ComentarioCreate,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    post = _get_post(db, post_id)
    texto = comentario.texto.strip()
    if not texto:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="O comentário não pode ficar vazio.")

    db_comentario = Comentario(post_id=post.id, aluno_id=aluno.id, texto=texto)
    db.add(db_comentario)
    _notificar(db, post, aluno.id, "comentario", texto_comentario=texto)
    db.commit()
    db.refresh(db_comentario)
    return _comentario_para_schema(db_comentario)

@router.delete("/comentarios/{comentario_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comentario(
    comentario_id: int,
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    db_comentario = db.query(Comentario).filter(Comentario.id == comentario_id).first()
    if not db_comentario:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Comentário não encontrado")
    aluno_logado = _aluno_do_usuario(db, current_user)
    autor = aluno_logado is not None and aluno_logado.id == db_comentario.aluno_id
    if not autor and current_user.role != "administrador":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você só pode excluir os próprios comentários.")
    db.delete(db_comentario)
    db.commit()
    return None


def _comentario_para_schema(comentario: Comentario) -> ComentarioRead:
    comentario_data = ComentarioRead.model_validate(comentario)
    comentario_data.aluno_nome = comentario.aluno.nome
    return comentario_data
