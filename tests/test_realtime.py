from academia import realtime
from academia.models.aviso import Aviso


def test_feed_entrega_para_assinantes_da_tabela():
    feed = realtime.ChangeFeed()
    recebidos = []
    feed.subscribe("presencas", recebidos.append)
    feed.subscribe("posts_treino", lambda e: recebidos.append(("outro", e)))

    feed.publish(realtime.ChangeEvent("presencas", "INSERT", 1))

    assert recebidos == [realtime.ChangeEvent("presencas", "INSERT", 1)]


def test_erro_de_um_assinante_nao_afeta_os_demais():
    feed = realtime.ChangeFeed()
    recebidos = []

    def quebra(evento):
        raise RuntimeError("falhou")

    feed.subscribe("presencas", quebra)
    feed.subscribe("presencas", recebidos.append)
    feed.publish(realtime.ChangeEvent("presencas", "INSERT", 7))

    assert len(recebidos) == 1


def test_cancelar_assinatura():
    feed = realtime.ChangeFeed()
    recebidos = []
    with feed.subscribe("presencas", recebidos.append) as assinatura:
        feed.publish(realtime.ChangeEvent("presencas", "INSERT", 1))
    feed.publish(realtime.ChangeEvent("presencas", "INSERT", 2))

    assert [e.row_id for e in recebidos] == [1]
    assert assinatura.active is False
    assinatura.unsubscribe()


def test_eventos_do_banco_so_depois_do_commit(db):
    recebidos = []
    assinatura = realtime.feed.subscribe("avisos", recebidos.append)
    try:
        aviso = Aviso(titulo="Graduação", conteudo="Sábado às 10h")
        db.add(aviso)
        db.flush()
        assert recebidos == []

        db.commit()
        assert recebidos == [realtime.ChangeEvent("avisos", "INSERT", aviso.id)]

        db.add(Aviso(titulo="Rascunho", conteudo="..."))
        db.flush()
        db.rollback()
        assert len(recebidos) == 1

        db.delete(aviso)
        db.commit()
        assert recebidos[-1].event == "DELETE"
    finally:
        assinatura.unsubscribe()


def test_update_so_quando_a_linha_muda(db):
    aviso = Aviso(titulo="Treino aberto", conteudo="Domingo")
    db.add(aviso)
    db.commit()

    recebidos = []
    with realtime.feed.subscribe("avisos", recebidos.append):
        aviso.titulo = aviso.titulo
        db.commit()
        assert recebidos == []

        aviso.titulo = "Treino aberto de domingo"
        db.commit()
        assert recebidos == [realtime.ChangeEvent("avisos", "UPDATE", aviso.id)]
