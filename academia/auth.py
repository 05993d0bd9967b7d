from datetime import datetime, timedelta
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from academia import database
from academia.config import Config
from academia.models import usuario as models_usuario
from academia.models.aluno import Aluno


# --- CONFIGURAÇÃO DE SEGURANÇA ---
SECRET_KEY = Config.SECRET_KEY
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = Config.ACCESS_TOKEN_EXPIRE_MINUTES

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=Config.BCRYPT_ROUNDS)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")

ROLES = ("administrador", "instrutor", "aluno", "pendente")


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password):
    return pwd_context.hash(password)

def create_access_token(data: dict):
    to_encode = data.copy()
    expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)

# --- DEPENDÊNCIAS DE AUTENTICAÇÃO E AUTORIZAÇÃO ---
def get_user(db: Session, email: str):
    return db.query(models_usuario.Usuario).filter(models_usuario.Usuario.email == email).first()

def get_user_by_login(db: Session, login: str):
    """Aceita email ou nome de usuário no formulário de login."""
    Usuario = models_usuario.Usuario
    return db.query(Usuario).filter((Usuario.email == login) | (Usuario.username == login)).first()

async def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(database.get_db)):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Credenciais inválidas", headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        email: str = payload.get("sub")
        if email is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception
    user = get_user(db, email=email)
    if user is None:
        raise credentials_exception
    return user

async def get_current_active_user(current_user: models_usuario.Usuario = Depends(get_current_user)):
    """
    Verifica se o usuário está ativo. Bloqueia se o papel for 'pendente'.
    """
    if current_user.role == "pendente":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sua conta está pendente de aprovação por um administrador."
        )
    return current_user

async def get_admin_or_instrutor(current_user: models_usuario.Usuario = Depends(get_current_active_user)):
    if current_user.role not in ["administrador", "instrutor"]:
        raise HTTPException(status_code=403, detail="Acesso restrito a Administradores ou Instrutores.")
    return current_user

async def get_admin_user(current_user: models_usuario.Usuario = Depends(get_current_active_user)):
    """
    Verifica se o usuário atual tem o papel de 'administrador'.
    """
    if current_user.role != "administrador":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acesso restrito a administradores."
        )
    return current_user

def get_current_aluno(
    current_user: models_usuario.Usuario = Depends(get_current_active_user),
    db: Session = Depends(database.get_db)
):
    """Perfil de aluno do usuário logado."""
    if current_user.role != "aluno":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Acesso negado.")
    aluno = db.query(Aluno).filter(Aluno.usuario_id == current_user.id).first()
    if not aluno:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Perfil de aluno não encontrado.")
    return aluno
