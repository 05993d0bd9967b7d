# -*- coding: utf-8 -*-
"""
Modelo SQLAlchemy para a entidade Turma e seus horários (subturmas).
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Time, ForeignKey
from sqlalchemy.orm import relationship
from academia.database import Base
from academia.checkin import Horario, parse_schedule


def _dias_para_texto(dias):
    return ",".join(str(d) for d in sorted(dias))


def _texto_para_dias(texto):
    return frozenset(int(d) for d in texto.split(",") if d.strip())


class Turma(Base):
    __tablename__ = 'turmas'

    id = Column(Integer, primary_key=True, index=True)
    nome = Column(String(100), nullable=False)
    # Texto exibido ao aluno, ex.: "Segunda e Quarta, 19h-20h"
    horario = Column(String(150), nullable=False)
    # Versão estruturada do horário, preenchida a partir do texto ao salvar
    dias_semana = Column(String(20), nullable=True)  # índices date.weekday(), ex.: "0,2"
    hora_inicio = Column(Time, nullable=True)
    hora_fim = Column(Time, nullable=True)
    professor_id = Column(Integer, ForeignKey('professores.id'), nullable=True)
    capacidade = Column(Integer, nullable=False, default=30)
    gratuita = Column(Boolean, default=False)
    ativa = Column(Boolean, default=True)
    criada_em = Column(DateTime, default=datetime.utcnow)

    professor = relationship("Professor", back_populates="turmas")
    subturmas = relationship("SubTurma", back_populates="turma", cascade="all, delete-orphan")
    matriculas = relationship("Matricula", back_populates="turma", cascade="all, delete-orphan")
    presencas = relationship("Presenca", back_populates="turma", cascade="all, delete-orphan")

    def set_horario(self, texto):
        """Grava o texto do horário e a sua versão estruturada."""
        self.horario = texto
        estruturado = parse_schedule(texto)
        if estruturado is None:
            self.dias_semana, self.hora_inicio, self.hora_fim = None, None, None
            return
        self.dias_semana = _dias_para_texto(estruturado.dias)
        self.hora_inicio = estruturado.inicio
        self.hora_fim = estruturado.fim

    @property
    def horario_estruturado(self):
        # Turmas antigas sem colunas estruturadas são convertidas na leitura
        if self.dias_semana is None:
            return parse_schedule(self.horario)
        return Horario(dias=_texto_para_dias(self.dias_semana), inicio=self.hora_inicio, fim=self.hora_fim)


class SubTurma(Base):
    __tablename__ = 'subturmas'

    id = Column(Integer, primary_key=True, index=True)
    turma_id = Column(Integer, ForeignKey('turmas.id'), nullable=False)
    nome = Column(String(100), nullable=False)
    dias_semana = Column(String(100), nullable=False)  # ex.: "segunda, quarta"
    horario = Column(String(50), nullable=False)  # ex.: "19:00 às 20:00"
    ativa = Column(Boolean, default=True)

    turma = relationship("Turma", back_populates="subturmas")
