import logging
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from academia import database
from academia.auth import get_password_hash, get_admin_user
from academia.models.usuario import Usuario
from academia.schemas import usuario as schemas_usuario

router = APIRouter(
    prefix="/api/v1/usuarios",
    tags=["Usuarios"],
    dependencies=[Depends(get_admin_user)]
)

@router.post("", response_model=schemas_usuario.UsuarioRead, status_code=status.HTTP_201_CREATED)
def create_user(user: schemas_usuario.UsuarioCreate, db: Session = Depends(database.get_db)):
    if db.query(Usuario).filter(Usuario.email == user.email).first():
        raise HTTPException(status_code=400, detail="Email já registrado")

    if db.query(Usuario).filter(Usuario.username == user.username).first():
        raise HTTPException(status_code=400, detail="Nome de usuário já registrado")

    db_user = Usuario(
        email=user.email,
        username=user.username,
        nome=user.nome,
        hashed_password=get_password_hash(user.password),
        role=user.role
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user

@router.get("", response_model=List[schemas_usuario.UsuarioRead])
def read_users(skip: int = 0, limit: int = 100, db: Session = Depends(database.get_db)):
    return db.query(Usuario).order_by(Usuario.id).offset(skip).limit(limit).all()

@router.get("/{user_id}", response_model=schemas_usuario.UsuarioRead)
def read_user(user_id: int, db: Session = Depends(database.get_db)):
    db_user = db.query(Usuario).filter(Usuario.id == user_id).first()
    if db_user is None:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    return db_user

@router.put("/{user_id}", response_model=schemas_usuario.UsuarioRead)
def update_user(user_id: int, user: schemas_usuario.UsuarioUpdate, db: Session = Depends(database.get_db)):
    db_user = db.query(Usuario).filter(Usuario.id == user_id).first()
    if not db_user:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")

    update_data = user.model_dump(exclude_unset=True)

    if "username" in update_data and update_data["username"] != db_user.username:
        if db.query(Usuario).filter(Usuario.username == update_data["username"]).first():
            raise HTTPException(status_code=400, detail="Nome de usuário já está em uso.")

    if "email" in update_data and update_data["email"] != db_user.email:
        if db.query(Usuario).filter(Usuario.email == update_data["email"]).first():
            raise HTTPException(status_code=400, detail="Email já registrado")

    if "password" in update_data:
        db_user.hashed_password = get_password_hash(update_data.pop("password"))

    for key, value in update_data.items():
        setattr(db_user, key, value)

    db.commit()
    db.refresh(db_user)
    return db_user

@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(database.get_db),
    current_user: Usuario = Depends(get_admin_user)
):
    """
    Exclui o usuário. O perfil de aluno vinculado é removido junto, com
    presenças, posts, reações, comentários, conquistas e notificações.
    """
    if user_id == current_user.id:
        raise HTTPException(status_code=400, detail="Você não pode excluir o próprio usuário.")
    db_user = db.query(Usuario).filter(Usuario.id == user_id).first()
    if not db_user:
        raise HTTPException(status_code=404, detail="Usuário não encontrado")
    if db_user.professor is not None:
        db_user.professor.usuario_id = None
    db.delete(db_user)
    db.commit()
    logging.info(f"Usuário {user_id} excluído por {current_user.username}")
    return None
