# -*- coding: utf-8 -*-
"""
Upload de imagens para o bucket S3 compatível (Cloudflare R2).
"""

import logging
import boto3

from academia.config import Config


class StorageError(Exception):
    pass


def get_s3_client():
    if not all([Config.S3_ENDPOINT_URL, Config.AWS_ACCESS_KEY_ID, Config.AWS_SECRET_ACCESS_KEY,
                Config.S3_BUCKET_NAME, Config.PUBLIC_BUCKET_URL]):
        raise StorageError("Configuração de armazenamento na nuvem incompleta.")
    return boto3.client(
        's3',
        endpoint_url=Config.S3_ENDPOINT_URL,
        aws_access_key_id=Config.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=Config.AWS_SECRET_ACCESS_KEY,
        region_name="auto"
    )


def upload_image(file_obj, key, content_type="image/jpeg"):
    """Envia a imagem e retorna a URL pública do objeto."""
    s3_client = get_s3_client()
    try:
        s3_client.upload_fileobj(file_obj, Config.S3_BUCKET_NAME, key, ExtraArgs={'ContentType': content_type})
    except Exception as e:
        logging.error(f"Erro no upload para o bucket ({key}): {e}")
        raise StorageError("Falha ao fazer upload da foto.") from e
    return f"{Config.PUBLIC_BUCKET_URL.rstrip('/')}/{key}"


def delete_image(key):
    """Remove o objeto do bucket. Falhas só são registradas no log."""
    try:
        get_s3_client().delete_object(Bucket=Config.S3_BUCKET_NAME, Key=key)
    except Exception as e:
        logging.error(f"Objeto órfão no bucket ({key}): {e}")
