from pydantic import BaseModel
from typing import Optional, List
from datetime import date, datetime

class CheckinCreate(BaseModel):
    turma_id: int
    subturma_id: Optional[int] = None

class DisponibilidadeRead(BaseModel):
    available: bool
    message: str
    next_allowed_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class PresencaRead(BaseModel):
    id: int
    aluno_id: int
    turma_id: int
    subturma_id: Optional[int] = None
    registrado_em: datetime
    data_presenca: date
    aluno_nome: Optional[str] = None
    turma_nome: Optional[str] = None
    turma_horario: Optional[str] = None

    class Config:
        from_attributes = True

class ConquistaDesbloqueada(BaseModel):
    id: int
    nome: str
    pontos: int

    class Config:
        from_attributes = True

class CheckinResult(BaseModel):
    mensagem: str
    presenca: PresencaRead
    conquistas_desbloqueadas: List[ConquistaDesbloqueada] = []

class TurmaCheckinRead(BaseModel):
    turma_id: int
    nome: str
    horario: str
    professor_nome: Optional[str] = None
    ja_fez_checkin: bool
    checkin: DisponibilidadeRead

class PresencaListagem(BaseModel):
    total: int
    hoje: int
    ultimos_7_dias: int
    registros: List[PresencaRead]

class DiaProgresso(BaseModel):
    data: date
    concluido: bool

class ProgressoSemanalRead(BaseModel):
    inicio_semana: date
    meta: int
    total: int
    percentual: float
    meta_atingida: bool
    dias: List[DiaProgresso]
    ultimos_checkins: List[PresencaRead] = []
