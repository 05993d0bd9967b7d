from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from academia.database import Base
from datetime import datetime

class Aluno(Base):
    __tablename__ = "alunos"

    id = Column(Integer, primary_key=True, index=True)
    usuario_id = Column(Integer, ForeignKey('usuarios.id'), nullable=True, unique=True)

    nome = Column(String(100), index=True, nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=True)
    telefone = Column(String(20))
    data_nascimento = Column(Date)
    contato_emergencia = Column(String(100))
    telefone_emergencia = Column(String(20))
    avatar_url = Column(String(255))
    mensalidade = Column(Float, nullable=False, default=0.0)
    dia_vencimento = Column(Integer, nullable=True)  # 1-31
    meta_semanal = Column(Integer, nullable=True)  # 1-7; nulo = derivada das turmas
    ativo = Column(Boolean, default=True)
    data_cadastro = Column(DateTime, default=datetime.utcnow)

    usuario = relationship("Usuario", back_populates="aluno")
    matriculas = relationship("Matricula", back_populates="aluno", cascade="all, delete-orphan")
    solicitacoes = relationship("SolicitacaoMatricula", back_populates="aluno", cascade="all, delete-orphan")
    presencas = relationship("Presenca", back_populates="aluno", cascade="all, delete-orphan")
    posts = relationship("PostTreino", back_populates="aluno", cascade="all, delete-orphan")
    reacoes = relationship("Reacao", back_populates="aluno", cascade="all, delete-orphan")
    comentarios = relationship("Comentario", back_populates="aluno", cascade="all, delete-orphan")
    conquistas = relationship("ConquistaAluno", back_populates="aluno", cascade="all, delete-orphan")
    notificacoes = relationship(
        "Notificacao", back_populates="aluno", cascade="all, delete-orphan",
        foreign_keys="Notificacao.aluno_id"
    )
    notificacoes_enviadas = relationship(
        "Notificacao", cascade="all, delete-orphan",
        foreign_keys="Notificacao.remetente_id", back_populates="remetente"
    )
