# -*- coding: utf-8 -*-
"""
Avisos de alteração de tabelas para quem precisa recarregar dados.

Um assinante registra um callback para uma tabela e recebe um `ChangeEvent`
depois que uma transação que alterou aquela tabela é confirmada. O evento é
só uma dica para buscar de novo o estado no banco: não traz os dados da linha
e não há garantia de entrega.

A API não assina o feed: `install` só liga a coleta aos commits. Quem
precisar reagir a check-ins e posts (ex.: um websocket que atualize o
ranking no app) registra o callback com `feed.subscribe("presencas", ...)`.
"""

import logging
import threading
from collections import defaultdict, namedtuple

from sqlalchemy import event, inspect

logger = logging.getLogger(__name__)

ChangeEvent = namedtuple("ChangeEvent", ["table", "event", "row_id"])

_PENDENTES = "academia_realtime_pendentes"


class Subscription:
    def __init__(self, feed, table, callback):
        self._feed = feed
        self.table = table
        self.callback = callback
        self.active = True

    def unsubscribe(self):
        if self.active:
            self._feed._remove(self)
            self.active = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.unsubscribe()


class ChangeFeed:
    def __init__(self):
        self._lock = threading.Lock()
        self._assinaturas = defaultdict(list)

    def subscribe(self, table, callback) -> Subscription:
        assinatura = Subscription(self, table, callback)
        with self._lock:
            self._assinaturas[table].append(assinatura)
        return assinatura

    def _remove(self, assinatura):
        with self._lock:
            if assinatura in self._assinaturas[assinatura.table]:
                self._assinaturas[assinatura.table].remove(assinatura)

    def publish(self, change: ChangeEvent):
        with self._lock:
            assinaturas = list(self._assinaturas.get(change.table, ()))
        for assinatura in assinaturas:
            try:
                assinatura.callback(change)
            except Exception:
                logger.exception("Erro no assinante de %s", change.table)


feed = ChangeFeed()


def _identidade(obj):
    identidade = inspect(obj).identity
    return identidade[0] if identidade else None


def _coletar(session, flush_context):
    pendentes = session.info.setdefault(_PENDENTES, [])
    for tipo, objetos in (("INSERT", session.new), ("UPDATE", session.dirty), ("DELETE", session.deleted)):
        for obj in objetos:
            if tipo == "UPDATE" and not session.is_modified(obj):
                continue
            tabela = getattr(obj, "__tablename__", None)
            if tabela:
                pendentes.append((tabela, tipo, obj))


def _publicar(session):
    pendentes = session.info.pop(_PENDENTES, [])
    vistos = set()
    for tabela, tipo, obj in pendentes:
        change = ChangeEvent(tabela, tipo, _identidade(obj))
        if change in vistos:
            continue
        vistos.add(change)
        feed.publish(change)


def _descartar(session):
    session.info.pop(_PENDENTES, None)


def install(session_factory):
    """Liga os eventos de sessão do SQLAlchemy ao feed de alterações."""
    event.listen(session_factory, "after_flush", _coletar)
    event.listen(session_factory, "after_commit", _publicar)
    event.listen(session_factory, "after_rollback", _descartar)
