# -*- coding: utf-8 -*-
"""
Configurações da aplicação lidas do ambiente (.env).
"""

import os
from dotenv import load_dotenv
from dateutil import tz

load_dotenv()


class Config:
    ENVIRONMENT = os.environ.get("ENVIRONMENT", "development")
    DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./academia.db")
    SECRET_KEY = os.environ.get("SECRET_KEY") or "dev-secret-key-change-in-production"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 8))
    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", 12))
    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:5700")
    LOG_FILE = os.environ.get("LOG_FILE")

    # Armazenamento de fotos (S3 / Cloudflare R2)
    S3_ENDPOINT_URL = os.environ.get("S3_ENDPOINT_URL")
    AWS_ACCESS_KEY_ID = os.environ.get("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY = os.environ.get("AWS_SECRET_ACCESS_KEY")
    S3_BUCKET_NAME = os.environ.get("S3_BUCKET_NAME")
    PUBLIC_BUCKET_URL = os.environ.get("PUBLIC_BUCKET_URL")


# Fuso único para todo cálculo de data/hora do sistema, igual para todos os
# usuários e ambientes.
FUSO_REFERENCIA = "America/Sao_Paulo"


def reference_tz():
    return tz.gettz(FUSO_REFERENCIA)
