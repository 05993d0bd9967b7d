# -*- coding: utf-8 -*-
"""
Schemas Pydantic para a entidade Turma.
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import time

class SubTurmaBase(BaseModel):
    nome: str = Field(..., max_length=100)
    dias_semana: str = Field(..., max_length=100)
    horario: str = Field(..., max_length=50)
    ativa: bool = True

class SubTurmaCreate(SubTurmaBase):
    pass

class SubTurmaRead(SubTurmaBase):
    id: int
    turma_id: int

    class Config:
        from_attributes = True

class TurmaBase(BaseModel):
    nome: str = Field(..., max_length=100)
    horario: str = Field(..., min_length=1, max_length=150)
    professor_id: Optional[int] = None
    capacidade: int = Field(30, ge=1)
    gratuita: bool = False
    ativa: bool = True

class TurmaCreate(TurmaBase):
    pass

class TurmaUpdate(BaseModel):
    # Todos os campos são opcionais para permitir atualizações parciais
    nome: Optional[str] = Field(None, max_length=100)
    horario: Optional[str] = Field(None, min_length=1, max_length=150)
    professor_id: Optional[int] = None
    capacidade: Optional[int] = Field(None, ge=1)
    gratuita: Optional[bool] = None
    ativa: Optional[bool] = None

class TurmaRead(TurmaBase):
    id: int
    dias: List[int] = []
    hora_inicio: Optional[time] = None
    hora_fim: Optional[time] = None
    total_alunos: int = 0
    valor_total: float = 0.0
    professor_nome: Optional[str] = None
    subturmas: List[SubTurmaRead] = []

    class Config:
        from_attributes = True
