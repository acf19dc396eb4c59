import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from freshgrupo.core.rate_limiter import limit_auth_requests
from freshgrupo.core.security import create_access_token, verify_password
from freshgrupo.crud import user as crud_user
from freshgrupo.db.deps import get_db
from freshgrupo.models.user import User
from freshgrupo.schemas.user import Token, UserBrief, UserLogin, UserRegister

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(limit_auth_requests)])


def _authenticate(db: Session, credentials: UserLogin) -> User:
    db_user = crud_user.get_user_by_email(db, email=credentials.email)
    if not db_user or not verify_password(credentials.password, db_user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not db_user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is deactivated")
    return db_user


def _token_response(message: str, db_user: User) -> Token:
    return Token(message=message, token=create_access_token(db_user), user=UserBrief.model_validate(db_user))


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
def register(user: UserRegister, db: Session = Depends(get_db)):
    if crud_user.get_user_by_email(db, email=user.email):
        raise HTTPException(status_code=400, detail="User already exists with this email")
    db_user = crud_user.create_user(db=db, user_data=user)
    logger.info(f"Registered user {db_user.id}")
    return _token_response("User registered successfully", db_user)


@router.post("/login", response_model=Token)
def login(credentials: UserLogin, db: Session = Depends(get_db)):
    db_user = _authenticate(db, credentials)
    return _token_response("Login successful", db_user)


@router.post("/admin-login", response_model=Token)
def admin_login(credentials: UserLogin, db: Session = Depends(get_db)):
    db_user = _authenticate(db, credentials)
    if not db_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return _token_response("Admin login successful", db_user)
