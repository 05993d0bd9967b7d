from pydantic import BaseModel, EmailStr, Field
from typing import Optional, Literal

Role = Literal["administrador", "instrutor", "aluno", "pendente"]

class UsuarioBase(BaseModel):
    email: EmailStr
    username: str = Field(..., min_length=3, max_length=50)
    nome: Optional[str] = None
    role: Role

class UsuarioCreate(UsuarioBase):
    password: str = Field(..., min_length=6)

class UsuarioUpdate(BaseModel):
    email: Optional[EmailStr] = None
    username: Optional[str] = Field(None, min_length=3, max_length=50)
    nome: Optional[str] = None
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Role] = None

class UsuarioRead(UsuarioBase):
    id: int
    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str
    user_info: UsuarioRead
