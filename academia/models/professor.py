# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Professor (instrutor).
"""

from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from academia.database import Base

class Professor(Base):
    __tablename__ = 'professores'

    id = Column(Integer, primary_key=True, index=True)
    usuario_id = Column(Integer, ForeignKey('usuarios.id'), nullable=True, unique=True)
    nome = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=True)
    telefone = Column(String(20), nullable=True)
    especialidades = Column(String(200), nullable=True)  # separadas por vírgula
    bio = Column(Text, nullable=True)
    avatar_url = Column(String(255), nullable=True)

    usuario = relationship("Usuario", back_populates="professor")
    turmas = relationship("Turma", back_populates="professor")
