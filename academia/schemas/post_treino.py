from pydantic import BaseModel, Field
from typing import Optional, Dict, Literal
from datetime import date, datetime

TipoReacao = Literal["fogo", "forca", "palmas", "coracao", "medalha"]

class PostRead(BaseModel):
    id: int
    aluno_id: int
    turma_id: Optional[int] = None
    data_treino: date
    foto_url: str
    thumbnail_url: Optional[str] = None
    legenda: Optional[str] = None
    criado_em: Optional[datetime] = None
    aluno_nome: Optional[str] = None
    aluno_avatar_url: Optional[str] = None
    total_reacoes: int = 0
    reacoes_resumo: Dict[str, int] = {}
    total_comentarios: int = 0
    minha_reacao: Optional[str] = None

    class Config:
        from_attributes = True

class ReacaoCreate(BaseModel):
    tipo: TipoReacao

class ReacaoResult(BaseModel):
    acao: Literal["adicionada", "alterada", "removida"]
    tipo: Optional[str] = None

class ComentarioCreate(BaseModel):
    texto: str = Field(..., min_length=1, max_length=500)

class ComentarioRead(BaseModel):
    id: int
    post_id: int
    aluno_id: int
    texto: str
    criado_em: Optional[datetime] = None
    aluno_nome: Optional[str] = None

    class Config:
        from_attributes = True

class PosicaoRankingRead(BaseModel):
    posicao: int
    aluno_id: int
    nome: str
    avatar_url: Optional[str] = None
    score: int
    checkin_count: int
    post_count: int
