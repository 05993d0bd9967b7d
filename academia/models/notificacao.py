from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from academia.database import Base

class Notificacao(Base):
    __tablename__ = "notificacoes"

    id = Column(Integer, primary_key=True, index=True)
    aluno_id = Column(Integer, ForeignKey("alunos.id"), nullable=False, index=True)  # destinatário
    remetente_id = Column(Integer, ForeignKey("alunos.id"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts_treino.id"), nullable=False)
    tipo = Column(String(20), nullable=False)  # reacao ou comentario
    tipo_reacao = Column(String(20), nullable=True)
    texto_comentario = Column(String(500), nullable=True)
    lida = Column(Boolean, default=False)
    criada_em = Column(DateTime, default=datetime.utcnow)

    aluno = relationship("Aluno", back_populates="notificacoes", foreign_keys=[aluno_id])
    remetente = relationship("Aluno", foreign_keys=[remetente_id], back_populates="notificacoes_enviadas")
    post = relationship("PostTreino", back_populates="notificacoes")
