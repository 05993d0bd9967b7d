# -*- coding: utf-8 -*-
"""
Rotas do portal do aluno: perfil, matrículas, check-in, meta semanal e
conquistas.
"""

import logging
from datetime import datetime, time
from typing import List

from dateutil import tz
from fastapi import APIRouter, Depends, HTTPException, status, File, UploadFile, Response
from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from academia import auth, database, repository
from academia.achievements import evaluate_achievements
from academia.checkin import is_checkin_available
from academia.config import reference_tz
from academia.models.aluno import Aluno
from academia.models.conquista import Conquista, ConquistaAluno
from academia.models.matricula import Matricula, SolicitacaoMatricula
from academia.models.presenca import Presenca
from academia.models.turma import Turma, SubTurma
from academia.models.usuario import Usuario
from academia.ranking import calculate_default_weekly_goal, week_bounds, weekly_progress
from academia.routes.alunos_fastapi import aluno_para_schema, salvar_avatar
from academia.routes.matriculas_fastapi import matricula_para_schema, solicitacao_para_schema
from academia.routes.presencas_fastapi import presenca_para_schema
from academia.schemas import aluno as schemas_aluno
from academia.schemas.conquista import ConquistaAlunoRead, ConquistaRead, ResumoConquistas
from academia.schemas.matricula import (MatriculaPortalCreate, MatriculaPortalResult,
                                        MatriculaRead, SolicitacaoRead)
from academia.schemas.presenca import (CheckinCreate, CheckinResult, ConquistaDesbloqueada,
                                       DiaProgresso, DisponibilidadeRead, ProgressoSemanalRead,
                                       TurmaCheckinRead)


MSG_CHECKIN_DUPLICADO = "Você já fez check-in nesta turma hoje!"


router = APIRouter(
    prefix="/api/v1/portal",
    tags=["Portal do Aluno"]
)


# --- Perfil ---

@router.post("/perfil", response_model=schemas_aluno.AlunoRead, status_code=status.HTTP_201_CREATED)
def setup_perfil(
    perfil: schemas_aluno.AlunoPerfilSetup,
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    """
    Cria o perfil de aluno do usuário logado (primeiro acesso ao portal).
    """
    if current_user.role != "aluno":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado.")
    if db.query(Aluno).filter(Aluno.usuario_id == current_user.id).first():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Seu perfil já foi cadastrado.")

    dados = perfil.model_dump()
    if not dados.get("email"):
        dados["email"] = current_user.email
    db_aluno = Aluno(usuario_id=current_user.id, **dados)
    db.add(db_aluno)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Erro de integridade ao criar perfil do usuário {current_user.id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Este email já está cadastrado para outro aluno.")
    db.refresh(db_aluno)
    return aluno_para_schema(db, db_aluno)

@router.get("/me", response_model=schemas_aluno.AlunoRead)
def get_current_aluno_profile(
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    return aluno_para_schema(db, aluno)

@router.put("/me", response_model=schemas_aluno.AlunoRead)
def update_current_aluno_profile(
    perfil: schemas_aluno.AlunoPerfilUpdate,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    for key, value in perfil.model_dump(exclude_unset=True).items():
        setattr(aluno, key, value)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logging.error(f"Erro de integridade ao atualizar perfil do aluno {aluno.id}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Este email já está cadastrado para outro aluno.")
    db.refresh(aluno)
    return aluno_para_schema(db, aluno)

@router.post("/me/avatar", response_model=schemas_aluno.AlunoRead)
def update_current_aluno_avatar(
    foto: UploadFile = File(...),
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    salvar_avatar(db, aluno, foto)
    return aluno_para_schema(db, aluno)

class PasswordUpdate(BaseModel):
    current_password: str = Field(..., title="Senha Atual")
    new_password: str = Field(..., min_length=6, title="Nova Senha")

@router.put("/me/update-password", status_code=status.HTTP_204_NO_CONTENT)
def update_current_aluno_password(
    password_data: PasswordUpdate,
    current_user: Usuario = Depends(auth.get_current_active_user),
    db: Session = Depends(database.get_db)
):
    """
    Permite ao usuário logado atualizar sua própria senha.
    """
    if not current_user.hashed_password or not auth.verify_password(password_data.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A senha atual está incorreta."
        )

    current_user.hashed_password = auth.get_password_hash(password_data.new_password)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Matrículas ---

@router.get("/matriculas", response_model=List[MatriculaRead])
def get_aluno_matriculas(
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    matriculas = db.query(Matricula).options(joinedload(Matricula.turma)).filter(
        Matricula.aluno_id == aluno.id
    ).order_by(Matricula.data_matricula.desc()).all()
    return [matricula_para_schema(m) for m in matriculas]

@router.get("/solicitacoes", response_model=List[SolicitacaoRead])
def get_aluno_solicitacoes(
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    solicitacoes = db.query(SolicitacaoMatricula).filter(
        SolicitacaoMatricula.aluno_id == aluno.id
    ).order_by(SolicitacaoMatricula.criada_em.desc()).all()
    return [solicitacao_para_schema(s) for s in solicitacoes]

@router.post("/matriculas", response_model=MatriculaPortalResult, status_code=status.HTTP_201_CREATED)
def matricular_aluno(
    dados: MatriculaPortalCreate,
    response: Response,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    """
    Matrícula feita pelo próprio aluno.

    Turmas gratuitas e a primeira turma paga são liberadas na hora; uma
    segunda turma paga vira uma solicitação para a equipe aprovar (202).
    """
    turma = db.query(Turma).filter(Turma.id == dados.turma_id, Turma.ativa == True).first()
    if not turma:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Turma não encontrada")

    matriculas = db.query(Matricula).options(joinedload(Matricula.turma)).filter(
        Matricula.aluno_id == aluno.id
    ).all()
    if any(m.turma_id == turma.id for m in matriculas):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Você já está matriculado nesta turma.")

    tem_turma_paga = any(not m.turma.gratuita for m in matriculas)
    if turma.gratuita or not tem_turma_paga:
        db_matricula = Matricula(aluno_id=aluno.id, turma_id=turma.id)
        db.add(db_matricula)
        db.commit()
        db.refresh(db_matricula)
        return MatriculaPortalResult(
            status="matriculado",
            mensagem=f"Matrícula na turma {turma.nome} realizada!",
            matricula=matricula_para_schema(db_matricula),
        )

    pendente = db.query(SolicitacaoMatricula).filter(
        SolicitacaoMatricula.aluno_id == aluno.id,
        SolicitacaoMatricula.turma_id == turma.id,
        SolicitacaoMatricula.status == "pendente"
    ).first()
    if pendente:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Já existe uma solicitação pendente para esta turma.")

    solicitacao = SolicitacaoMatricula(aluno_id=aluno.id, turma_id=turma.id)
    db.add(solicitacao)
    db.commit()
    db.refresh(solicitacao)
    logging.info(f"Aluno {aluno.id} solicitou matrícula na turma {turma.id}")
    response.status_code = status.HTTP_202_ACCEPTED
    return MatriculaPortalResult(
        status="solicitado",
        mensagem="Solicitação enviada. Aguarde a aprovação da academia.",
        solicitacao=solicitacao_para_schema(solicitacao),
    )


# --- Check-in ---

@router.get("/checkin/turmas", response_model=List[TurmaCheckinRead])
def get_turmas_checkin(
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    """
    Turmas do aluno com a situação da janela de check-in agora.
    """
    fuso = reference_tz()
    agora = datetime.now(fuso)

    matriculas = db.query(Matricula).options(
        joinedload(Matricula.turma).joinedload(Turma.professor)
    ).filter(Matricula.aluno_id == aluno.id).all()
    feitos_hoje = {
        turma_id for (turma_id,) in db.query(Presenca.turma_id).filter(
            Presenca.aluno_id == aluno.id,
            Presenca.data_presenca == agora.date()
        ).all()
    }

    resultado = []
    for matricula in matriculas:
        turma = matricula.turma
        if not turma.ativa:
            continue
        disponibilidade = is_checkin_available(turma.horario_estruturado, agora, fuso)
        resultado.append(TurmaCheckinRead(
            turma_id=turma.id,
            nome=turma.nome,
            horario=turma.horario,
            professor_nome=turma.professor.nome if turma.professor else None,
            ja_fez_checkin=turma.id in feitos_hoje,
            checkin=DisponibilidadeRead.model_validate(disponibilidade),
        ))
    return resultado

@router.post("/checkin", response_model=CheckinResult, status_code=status.HTTP_201_CREATED)
def fazer_checkin(
    dados: CheckinCreate,
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    matricula = db.query(Matricula).options(joinedload(Matricula.turma)).filter(
        Matricula.aluno_id == aluno.id,
        Matricula.turma_id == dados.turma_id
    ).first()
    if not matricula:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Você não está matriculado nesta turma.")
    turma = matricula.turma
    if not turma.ativa:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Turma não encontrada")

    if dados.subturma_id is not None:
        subturma = db.query(SubTurma).filter(
            SubTurma.id == dados.subturma_id, SubTurma.turma_id == turma.id
        ).first()
        if not subturma:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subturma não encontrada")

    fuso = reference_tz()
    agora = datetime.now(fuso)
    disponibilidade = is_checkin_available(turma.horario_estruturado, agora, fuso)
    if not disponibilidade.available:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=disponibilidade.message)

    presenca = Presenca(
        aluno_id=aluno.id,
        turma_id=turma.id,
        subturma_id=dados.subturma_id,
        registrado_em=agora.astimezone(tz.UTC).replace(tzinfo=None),
        data_presenca=agora.date(),
    )
    db.add(presenca)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if repository.is_unique_violation(e):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=MSG_CHECKIN_DUPLICADO)
        logging.error(f"Erro de integridade no check-in do aluno {aluno.id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erro ao registrar check-in.")
    db.refresh(presenca)

    desbloqueadas = evaluate_achievements(db, aluno.id, agora.date())
    return CheckinResult(
        mensagem="Check-in realizado com sucesso!",
        presenca=presenca_para_schema(presenca),
        conquistas_desbloqueadas=[ConquistaDesbloqueada.model_validate(c) for c in desbloqueadas],
    )

@router.get("/progresso-semanal", response_model=ProgressoSemanalRead)
def get_progresso_semanal(
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    """
    Check-ins da semana (segunda a domingo) frente à meta semanal do aluno.
    """
    fuso = reference_tz()
    hoje = datetime.now(fuso).date()
    segunda, _ = week_bounds(hoje)
    # registrado_em é gravado em UTC sem fuso
    desde = datetime.combine(segunda, time.min, tzinfo=fuso).astimezone(tz.UTC).replace(tzinfo=None)

    presencas = repository.list_attendance(db, aluno.id, desde)
    meta = aluno.meta_semanal or calculate_default_weekly_goal(repository.list_enrollments(db, aluno.id))
    progresso = weekly_progress([p.registrado_em for p in presencas], meta, hoje, fuso)

    return ProgressoSemanalRead(
        inicio_semana=progresso.inicio_semana,
        meta=progresso.meta,
        total=progresso.total,
        percentual=progresso.percentual,
        meta_atingida=progresso.meta_atingida,
        dias=[DiaProgresso(data=dia, concluido=feito) for dia, feito in progresso.dias.items()],
        ultimos_checkins=[presenca_para_schema(p) for p in presencas[:5]],
    )


# --- Conquistas ---

@router.get("/conquistas", response_model=ResumoConquistas)
def get_conquistas_aluno(
    aluno: Aluno = Depends(auth.get_current_aluno),
    db: Session = Depends(database.get_db)
):
    catalogo = db.query(Conquista).filter(Conquista.ativa == True).order_by(Conquista.id).all()
    registros = {
        ca.conquista_id: ca
        for ca in db.query(ConquistaAluno).filter(ConquistaAluno.aluno_id == aluno.id).all()
    }

    conquistas = []
    for conquista in catalogo:
        registro = registros.get(conquista.id)
        conquistas.append(ConquistaAlunoRead(
            conquista=ConquistaRead.model_validate(conquista),
            progresso=registro.progresso if registro else 0,
            concluida=bool(registro and registro.concluida),
            desbloqueada_em=registro.desbloqueada_em if registro else None,
        ))

    concluidas = [c for c in conquistas if c.concluida]
    return ResumoConquistas(
        concluidas=len(concluidas),
        total=len(conquistas),
        pontos=sum(c.conquista.pontos for c in concluidas),
        conquistas=conquistas,
    )
