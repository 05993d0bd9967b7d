# academia/schemas/aluno.py
from pydantic import BaseModel, Field, EmailStr, field_validator
from typing import Optional
from datetime import date, datetime


def _vazio_para_none(v):
    """Converte strings vazias para None antes da validação principal."""
    if isinstance(v, str) and v.strip() == '':
        return None
    return v


class AlunoBase(BaseModel):
    nome: str = Field(..., min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    telefone: Optional[str] = Field(None, max_length=20)
    data_nascimento: Optional[date] = None
    contato_emergencia: Optional[str] = Field(None, max_length=100)
    telefone_emergencia: Optional[str] = Field(None, max_length=20)
    mensalidade: float = Field(0.0, ge=0)
    dia_vencimento: Optional[int] = Field(None, ge=1, le=31)
    meta_semanal: Optional[int] = Field(None, ge=1, le=7)

    @field_validator('email', mode='before')
    @classmethod
    def email_vazio_para_none(cls, v):
        return _vazio_para_none(v)

class AlunoCreate(AlunoBase):
    usuario_id: Optional[int] = None
    ativo: bool = True

class AlunoPerfilSetup(AlunoBase):
    """Cadastro do próprio perfil, feito pelo aluno no primeiro acesso."""
    pass

class AlunoPerfilUpdate(BaseModel):
    """Campos que o próprio aluno pode editar no portal."""
    nome: Optional[str] = Field(None, min_length=3, max_length=100)
    email: Optional[EmailStr] = None
    telefone: Optional[str] = Field(None, max_length=20)
    data_nascimento: Optional[date] = None
    contato_emergencia: Optional[str] = Field(None, max_length=100)
    telefone_emergencia: Optional[str] = Field(None, max_length=20)
    mensalidade: Optional[float] = Field(None, ge=0)
    dia_vencimento: Optional[int] = Field(None, ge=1, le=31)
    meta_semanal: Optional[int] = Field(None, ge=1, le=7)

    @field_validator('email', mode='before')
    @classmethod
    def email_vazio_para_none(cls, v):
        return _vazio_para_none(v)

class AlunoUpdate(AlunoPerfilUpdate):
    ativo: Optional[bool] = None

class AlunoRead(AlunoBase):
    id: int
    usuario_id: Optional[int] = None
    avatar_url: Optional[str] = None
    ativo: bool = True
    data_cadastro: Optional[datetime] = None
    proximo_vencimento: Optional[date] = None
    meta_semanal_efetiva: Optional[int] = None

    class Config:
        from_attributes = True
