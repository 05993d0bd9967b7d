from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from academia.database import Base

class Matricula(Base):
    __tablename__ = "matriculas"
    __table_args__ = (UniqueConstraint("aluno_id", "turma_id", name="uq_matricula_aluno_turma"),)

    id = Column(Integer, primary_key=True, index=True)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False)
    turma_id = Column(Integer, ForeignKey("turmas.id"), nullable=False)
    data_matricula = Column(DateTime, default=datetime.utcnow)

    aluno = relationship("Aluno", back_populates="matriculas")
    turma = relationship("Turma", back_populates="matriculas")


class SolicitacaoMatricula(Base):
    """Pedido de matrícula em uma segunda turma regular, sujeito a aprovação."""
    __tablename__ = "solicitacoes_matricula"

    id = Column(Integer, primary_key=True, index=True)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False)
    turma_id = Column(Integer, ForeignKey("turmas.id"), nullable=False)
    status = Column(String(20), nullable=False, default="pendente")  # pendente, aprovada, rejeitada
    criada_em = Column(DateTime, default=datetime.utcnow)
    revisada_em = Column(DateTime, nullable=True)

    aluno = relationship("Aluno", back_populates="solicitacoes")
    turma = relationship("Turma")
