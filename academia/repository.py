# -*- coding: utf-8 -*-
"""
Consultas usadas pela lógica de check-in e ranking.

A lógica em `checkin` e `ranking` recebe os registros prontos; estas funções
são o único ponto que sabe buscá-los no banco.
"""

from collections import namedtuple
from datetime import date, datetime
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from academia.models.matricula import Matricula
from academia.models.post_treino import PostTreino
from academia.models.presenca import Presenca

AgendaMatricula = namedtuple("AgendaMatricula", ["turma_id", "schedule"])


def list_attendance(db: Session, aluno_id: int, since: datetime) -> List[Presenca]:
    return db.query(Presenca).filter(
        Presenca.aluno_id == aluno_id,
        Presenca.registrado_em >= since
    ).order_by(Presenca.registrado_em.desc()).all()


def list_week_attendance(db: Session, inicio: date, fim: date) -> List[Presenca]:
    """Check-ins de todos os alunos com data_presenca em [inicio, fim)."""
    return db.query(Presenca).options(joinedload(Presenca.aluno)).filter(
        Presenca.data_presenca >= inicio,
        Presenca.data_presenca < fim
    ).order_by(Presenca.registrado_em.asc(), Presenca.id.asc()).all()


def list_training_posts(db: Session, since_date: date, until_date: date = None) -> List[PostTreino]:
    query = db.query(PostTreino).options(joinedload(PostTreino.aluno)).filter(
        PostTreino.data_treino >= since_date
    )
    if until_date is not None:
        query = query.filter(PostTreino.data_treino < until_date)
    return query.order_by(PostTreino.criado_em.asc(), PostTreino.id.asc()).all()


def list_enrollments(db: Session, aluno_id: int) -> List[AgendaMatricula]:
    matriculas = db.query(Matricula).options(joinedload(Matricula.turma)).filter(
        Matricula.aluno_id == aluno_id
    ).all()
    return [AgendaMatricula(m.turma_id, m.turma.horario) for m in matriculas]


def is_unique_violation(exc: Exception) -> bool:
    """
    Reconhece a violação de unicidade (ex.: check-in repetido no mesmo dia).

    PostgreSQL informa o SQLSTATE 23505; o SQLite só informa a mensagem.
    """
    if not isinstance(exc, IntegrityError):
        return False
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505" or getattr(orig, "sqlstate", None) == "23505":
        return True
    return "unique" in str(orig).lower()
