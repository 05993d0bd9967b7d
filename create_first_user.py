import logging
import os

from academia.database import SessionLocal
from academia.auth import get_password_hash
from academia.models.usuario import Usuario

# Importação dos outros modelos para garantir que o SQLAlchemy registre tudo
from academia.models import (aluno, professor, turma, matricula, presenca,  # noqa: F401
                             post_treino, notificacao, conquista, aviso)

logger = logging.getLogger(__name__)


def create_first_user():
    db = SessionLocal()

    try:
        user = db.query(Usuario).filter(Usuario.username == "admin").first()

        if not user:
            senha = os.environ.get("ADMIN_PASSWORD", "admin")
            db_user = Usuario(
                username="admin",
                email=os.environ.get("ADMIN_EMAIL", "admin@suaacademia.com"),
                nome="Admin do Sistema",
                hashed_password=get_password_hash(senha),
                role="administrador"
            )
            db.add(db_user)
            db.commit()
            logger.info("Usuário administrador 'admin' criado")
        else:
            logger.info("Usuário administrador 'admin' já existe")

    except Exception:
        logger.exception("Erro ao criar usuário administrador")
        db.rollback()
    finally:
        db.close()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    create_first_user()
