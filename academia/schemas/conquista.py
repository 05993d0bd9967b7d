from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime

class ConquistaRead(BaseModel):
    id: int
    nome: str
    descricao: str
    icone: str
    categoria: str
    tipo_requisito: str
    valor_requisito: int
    pontos: int
    raridade: str

    class Config:
        from_attributes = True

class ConquistaAlunoRead(BaseModel):
    conquista: ConquistaRead
    progresso: int = 0
    concluida: bool = False
    desbloqueada_em: Optional[datetime] = None

class ResumoConquistas(BaseModel):
    concluidas: int
    total: int
    pontos: int
    conquistas: List[ConquistaAlunoRead]
