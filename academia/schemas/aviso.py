# academia/schemas/aviso.py
from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime

Prioridade = Literal["normal", "importante", "urgente"]

class AvisoBase(BaseModel):
    titulo: str = Field(..., max_length=150)
    conteudo: str
    prioridade: Prioridade = "normal"
    turma_id: Optional[int] = None
    publicado: bool = True

class AvisoCreate(AvisoBase):
    pass

class AvisoUpdate(BaseModel):
    titulo: Optional[str] = Field(None, max_length=150)
    conteudo: Optional[str] = None
    prioridade: Optional[Prioridade] = None
    turma_id: Optional[int] = None
    publicado: Optional[bool] = None

class AvisoRead(AvisoBase):
    id: int
    autor_id: Optional[int] = None
    criado_em: Optional[datetime] = None

    class Config:
        from_attributes = True
