from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class NotificacaoRead(BaseModel):
    id: int
    tipo: str
    post_id: int
    remetente_id: int
    remetente_nome: Optional[str] = None
    tipo_reacao: Optional[str] = None
    texto_comentario: Optional[str] = None
    lida: bool
    criada_em: Optional[datetime] = None

    class Config:
        from_attributes = True
