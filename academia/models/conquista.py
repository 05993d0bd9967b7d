from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from academia.database import Base

class Conquista(Base):
    __tablename__ = "conquistas"

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), nullable=False, unique=True)
    descricao = Column(String(255), nullable=False)
    icone = Column(String(50), nullable=False, default="trophy")
    categoria = Column(String(50), nullable=False)  # Presença, Treino, Sequência
    tipo_requisito = Column(String(50), nullable=False)  # total_checkins, total_posts, sequencia_dias
    valor_requisito = Column(Integer, nullable=False)
    pontos = Column(Integer, nullable=False, default=10)
    raridade = Column(String(20), nullable=False, default="comum")
    ativa = Column(Boolean, default=True)


class ConquistaAluno(Base):
    __tablename__ = "conquistas_aluno"
    __table_args__ = (UniqueConstraint("aluno_id", "conquista_id", name="uq_conquista_aluno"),)

    id = Column(Integer, primary_key=True, index=True)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False)
    conquista_id = Column(Integer, ForeignKey("conquistas.id"), nullable=False)
    progresso = Column(Integer, nullable=False, default=0)
    concluida = Column(Boolean, default=False)
    desbloqueada_em = Column(DateTime, nullable=True)

    aluno = relationship("Aluno", back_populates="conquistas")
    conquista = relationship("Conquista")
