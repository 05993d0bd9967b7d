from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime

class MatriculaCreate(BaseModel):
    aluno_id: int
    turma_id: int

class MatriculaPortalCreate(BaseModel):
    turma_id: int

class MatriculaRead(BaseModel):
    id: int
    aluno_id: int
    turma_id: int
    data_matricula: Optional[datetime] = None
    turma_nome: Optional[str] = None
    turma_horario: Optional[str] = None

    class Config:
        from_attributes = True

class SolicitacaoRead(BaseModel):
    id: int
    aluno_id: int
    turma_id: int
    status: str
    criada_em: Optional[datetime] = None
    revisada_em: Optional[datetime] = None
    aluno_nome: Optional[str] = None
    turma_nome: Optional[str] = None

    class Config:
        from_attributes = True

class MatriculaPortalResult(BaseModel):
    status: Literal["matriculado", "solicitado"]
    mensagem: str
    matricula: Optional[MatriculaRead] = None
    solicitacao: Optional[SolicitacaoRead] = None
