# academia/models/aviso.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from academia.database import Base

class Aviso(Base):
    __tablename__ = "avisos"

    id = Column(Integer, primary_key=True, index=True)
    titulo = Column(String(150), nullable=False)
    conteudo = Column(Text, nullable=False)
    prioridade = Column(String(20), default="normal")  # normal, importante, urgente
    turma_id = Column(Integer, ForeignKey("turmas.id", ondelete="CASCADE"), nullable=True)  # nulo = todas
    autor_id = Column(Integer, ForeignKey("usuarios.id", ondelete="SET NULL"), nullable=True)
    publicado = Column(Boolean, default=True)
    criado_em = Column(DateTime, default=datetime.utcnow)

    turma = relationship("Turma")
    autor = relationship("Usuario")
