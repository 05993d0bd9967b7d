from pydantic import BaseModel, Field, EmailStr
from typing import Optional

class ProfessorBase(BaseModel):
    nome: str = Field(..., max_length=100)
    email: Optional[EmailStr] = None
    telefone: Optional[str] = Field(None, max_length=20)
    especialidades: Optional[str] = Field(None, max_length=200)
    bio: Optional[str] = None
    usuario_id: Optional[int] = None

class ProfessorCreate(ProfessorBase):
    pass

class ProfessorUpdate(BaseModel):
    nome: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    telefone: Optional[str] = Field(None, max_length=20)
    especialidades: Optional[str] = Field(None, max_length=200)
    bio: Optional[str] = None
    usuario_id: Optional[int] = None

class ProfessorRead(ProfessorBase):
    id: int
    avatar_url: Optional[str] = None

    class Config:
        from_attributes = True
