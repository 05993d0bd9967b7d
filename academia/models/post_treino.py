# -*- coding: utf-8 -*-
"""
Modelos SQLAlchemy do feed de treinos: posts, reações e comentários.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from academia.database import Base

class PostTreino(Base):
    __tablename__ = "posts_treino"
    # Um post por aluno por dia de treino
    __table_args__ = (UniqueConstraint("aluno_id", "data_treino", name="uq_post_aluno_dia"),)

    id = Column(Integer, primary_key=True, index=True)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False, index=True)
    turma_id = Column(Integer, ForeignKey("turmas.id", ondelete="SET NULL"), nullable=True)
    data_treino = Column(Date, nullable=False, index=True)
    foto_url = Column(String(255), nullable=False)
    thumbnail_url = Column(String(255), nullable=True)
    legenda = Column(String(500), nullable=True)
    criado_em = Column(DateTime, default=datetime.utcnow)

    aluno = relationship("Aluno", back_populates="posts")
    reacoes = relationship("Reacao", back_populates="post", cascade="all, delete-orphan")
    comentarios = relationship("Comentario", back_populates="post", cascade="all, delete-orphan")
    notificacoes = relationship("Notificacao", back_populates="post", cascade="all, delete-orphan")


class Reacao(Base):
    __tablename__ = "reacoes"
    __table_args__ = (UniqueConstraint("post_id", "aluno_id", name="uq_reacao_post_aluno"),)

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts_treino.id"), nullable=False)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False)
    tipo = Column(String(20), nullable=False)  # ex.: fogo, forca, palmas
    criado_em = Column(DateTime, default=datetime.utcnow)

    post = relationship("PostTreino", back_populates="reacoes")
    aluno = relationship("Aluno", back_populates="reacoes")


class Comentario(Base):
    __tablename__ = "comentarios"

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts_treino.id"), nullable=False)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False)
    texto = Column(String(500), nullable=False)
    criado_em = Column(DateTime, default=datetime.utcnow)

    post = relationship("PostTreino", back_populates="comentarios")
    aluno = relationship("Aluno", back_populates="comentarios")
