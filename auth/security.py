# auth/security.py
"""
Funções de segurança: hash de senha e JWT
"""

from datetime import timedelta
from typing import Optional
from jose import JWTError, jwt
import bcrypt

from config import SECRET_KEY, ALGORITHM, ACCESS_TOKEN_EXPIRE_MINUTES
from utils.timezone import now_utc


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica se a senha plain corresponde ao hash"""
    return bcrypt.checkpw(
        plain_password.encode('utf-8'),
        hashed_password.encode('utf-8')
    )


def get_password_hash(password: str) -> str:
    """Gera hash da senha"""
    return bcrypt.hashpw(
        password.encode('utf-8'),
        bcrypt.gensalt()
    ).decode('utf-8')


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Cria um token JWT com os dados fornecidos.

    Args:
        data: Dicionário com dados a serem codificados (ex: {"sub": username})
        expires_delta: Tempo de expiração customizado

    Returns:
        Token JWT como string
    """
    to_encode = data.copy()
    expire = now_utc() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_user_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Token de acesso com as claims usadas pelas dependencies."""
    return create_access_token(
        {"sub": user.username, "user_id": user.id, "role": user.role},
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> Optional[dict]:
    """
    Decodifica um token JWT.

    Returns:
        Dicionário com dados do token ou None se inválido
    """
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
