# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para o check-in (presença) de um aluno em uma turma.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from academia.database import Base

class Presenca(Base):
    __tablename__ = "presencas"
    # No máximo um check-in por aluno, turma e dia (dia no fuso de referência)
    __table_args__ = (
        UniqueConstraint("aluno_id", "turma_id", "data_presenca", name="uq_presenca_aluno_turma_dia"),
    )

    id = Column(Integer, primary_key=True, index=True)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False, index=True)
    turma_id = Column(Integer, ForeignKey("turmas.id"), nullable=False)
    subturma_id = Column(Integer, ForeignKey("subturmas.id", ondelete="SET NULL"), nullable=True)
    registrado_em = Column(DateTime, nullable=False, default=datetime.utcnow, index=True)  # UTC
    data_presenca = Column(Date, nullable=False)

    aluno = relationship("Aluno", back_populates="presencas")
    turma = relationship("Turma", back_populates="presencas")
    subturma = relationship("SubTurma")
