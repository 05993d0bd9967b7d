# -*- coding: utf-8 -*-
"""
Avaliação de conquistas do aluno.

Chamado depois de cada check-in e de cada post de treino: recalcula o
progresso de todas as conquistas ativas e desbloqueia as que chegaram ao
valor exigido. Uma conquista concluída não volta atrás.
"""

import logging
from datetime import date, datetime, timedelta
from typing import List

from sqlalchemy import func
from sqlalchemy.orm import Session

from academia.models.conquista import Conquista, ConquistaAluno
from academia.models.post_treino import PostTreino
from academia.models.presenca import Presenca

logger = logging.getLogger(__name__)

CONQUISTAS_PADRAO = [
    dict(nome="Primeiro Treino", descricao="Faça seu primeiro check-in", icone="target",
         categoria="Presença", tipo_requisito="total_checkins", valor_requisito=1, pontos=10, raridade="comum"),
    dict(nome="Dedicação", descricao="Complete 10 check-ins", icone="calendar",
         categoria="Presença", tipo_requisito="total_checkins", valor_requisito=10, pontos=25, raridade="comum"),
    dict(nome="Veterano do Tatame", descricao="Complete 50 check-ins", icone="award",
         categoria="Marcos", tipo_requisito="total_checkins", valor_requisito=50, pontos=100, raridade="raro"),
    dict(nome="Centurião", descricao="Complete 100 check-ins", icone="crown",
         categoria="Marcos", tipo_requisito="total_checkins", valor_requisito=100, pontos=250, raridade="épico"),
    dict(nome="Primeira Foto", descricao="Poste sua primeira foto de treino", icone="camera",
         categoria="Treino", tipo_requisito="total_posts", valor_requisito=1, pontos=10, raridade="comum"),
    dict(nome="Fotógrafo do Dojo", descricao="Poste 20 fotos de treino", icone="camera",
         categoria="Treino", tipo_requisito="total_posts", valor_requisito=20, pontos=50, raridade="raro"),
    dict(nome="Em Chamas", descricao="Treine 3 dias seguidos", icone="flame",
         categoria="Sequência", tipo_requisito="sequencia_dias", valor_requisito=3, pontos=20, raridade="comum"),
    dict(nome="Imparável", descricao="Treine 7 dias seguidos", icone="flame",
         categoria="Sequência", tipo_requisito="sequencia_dias", valor_requisito=7, pontos=75, raridade="épico"),
]


def seed_achievements(db: Session):
    existentes = {nome for (nome,) in db.query(Conquista.nome).all()}
    novas = [Conquista(**dados) for dados in CONQUISTAS_PADRAO if dados["nome"] not in existentes]
    if novas:
        db.add_all(novas)
        db.commit()
        logger.info("%d conquistas padrão cadastradas", len(novas))


def checkin_streak(dias: List[date], hoje: date) -> int:
    """Dias consecutivos com check-in terminando hoje (ou ontem, se hoje ainda não treinou)."""
    presentes = set(dias)
    dia = hoje if hoje in presentes else hoje - timedelta(days=1)
    sequencia = 0
    while dia in presentes:
        sequencia += 1
        dia -= timedelta(days=1)
    return sequencia


def _metricas(db: Session, aluno_id: int, hoje: date):
    total_checkins = db.query(func.count(Presenca.id)).filter(Presenca.aluno_id == aluno_id).scalar() or 0
    total_posts = db.query(func.count(PostTreino.id)).filter(PostTreino.aluno_id == aluno_id).scalar() or 0
    dias = [d for (d,) in db.query(Presenca.data_presenca).filter(
        Presenca.aluno_id == aluno_id,
        Presenca.data_presenca > hoje - timedelta(days=400)
    ).distinct().all()]
    return {
        "total_checkins": total_checkins,
        "total_posts": total_posts,
        "sequencia_dias": checkin_streak(dias, hoje),
    }


def evaluate_achievements(db: Session, aluno_id: int, hoje: date) -> List[Conquista]:
    """
    Atualiza o progresso do aluno e retorna as conquistas desbloqueadas agora.

    `hoje` é a data no fuso de referência. Faz commit.
    """
    metricas = _metricas(db, aluno_id, hoje)
    registros = {
        ca.conquista_id: ca
        for ca in db.query(ConquistaAluno).filter(ConquistaAluno.aluno_id == aluno_id).all()
    }

    desbloqueadas = []
    for conquista in db.query(Conquista).filter(Conquista.ativa == True).all():
        valor = metricas.get(conquista.tipo_requisito)
        if valor is None:
            logger.warning("Tipo de requisito desconhecido: %s", conquista.tipo_requisito)
            continue

        registro = registros.get(conquista.id)
        if registro is None:
            registro = ConquistaAluno(aluno_id=aluno_id, conquista_id=conquista.id, progresso=0, concluida=False)
            db.add(registro)
        if registro.concluida:
            continue

        registro.progresso = min(valor, conquista.valor_requisito)
        if valor >= conquista.valor_requisito:
            registro.concluida = True
            registro.desbloqueada_em = datetime.utcnow()
            desbloqueadas.append(conquista)

    db.commit()
    if desbloqueadas:
        logger.info("Aluno %s desbloqueou: %s", aluno_id, ", ".join(c.nome for c in desbloqueadas))
    return desbloqueadas
