from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from academia.database import Base

class Usuario(Base):
    __tablename__ = "usuarios"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    nome = Column(String)
    hashed_password = Column(String, nullable=True)
    # administrador, instrutor, aluno ou pendente
    role = Column(String, nullable=False, default="pendente")

    # Excluir o usuário remove o perfil de aluno e tudo que pertence a ele
    aluno = relationship("Aluno", back_populates="usuario", uselist=False, cascade="all, delete-orphan")
    professor = relationship("Professor", back_populates="usuario", uselist=False)
