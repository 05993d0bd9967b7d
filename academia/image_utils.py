from PIL import Image, UnidentifiedImageError
import io
import logging

AVATAR_SIZE = (500, 500)
FOTO_TREINO_SIZE = (1600, 1600)
THUMBNAIL_SIZE = (400, 400)


def _abrir_rgb(file_stream):
    img = Image.open(file_stream)
    # Converte imagens com paleta (alguns GIFs) ou com canal alfa (PNG) para RGB
    if img.mode in ('P', 'RGBA', 'LA'):
        img = img.convert('RGB')
    return img


def _salvar_jpeg(img, max_size, quality):
    copia = img.copy()
    # Mantém a proporção, reduzindo até caber no tamanho máximo
    copia.thumbnail(max_size, Image.Resampling.LANCZOS)
    buffer = io.BytesIO()
    copia.save(buffer, format='JPEG', quality=quality, optimize=True)
    # Volta o "cursor" para o início para que o boto3 possa ler o buffer
    buffer.seek(0)
    return buffer


def process_avatar_image(file_stream, max_size=AVATAR_SIZE, quality=85):
    """
    Redimensiona e comprime uma imagem para ser usada como avatar.

    :param file_stream: O stream de bytes do arquivo de imagem.
    :return: (BytesIO com a imagem JPEG, content type) ou (None, None) se o
        arquivo não for uma imagem.
    """
    try:
        img = _abrir_rgb(file_stream)
        return _salvar_jpeg(img, max_size, quality), 'image/jpeg'
    except (UnidentifiedImageError, OSError) as e:
        logging.warning(f"Erro ao processar imagem de avatar: {e}")
        return None, None


def process_training_photo(file_stream, quality=85):
    """
    Gera a foto do post de treino e a miniatura usada no feed.

    :return: (foto, miniatura, content type) ou (None, None, None) se o
        arquivo não for uma imagem.
    """
    try:
        img = _abrir_rgb(file_stream)
        foto = _salvar_jpeg(img, FOTO_TREINO_SIZE, quality)
        miniatura = _salvar_jpeg(img, THUMBNAIL_SIZE, 75)
        return foto, miniatura, 'image/jpeg'
    except (UnidentifiedImageError, OSError) as e:
        logging.warning(f"Erro ao processar foto de treino: {e}")
        return None, None, None
