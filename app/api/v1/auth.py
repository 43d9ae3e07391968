from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.deps import get_current_user, get_db
from app.db.models.user import User
from app.schemas.auth import LoginIn, TokenOut, TokenUser
from app.services.auth import sign_in

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenOut)
def login(data: LoginIn, db: Session = Depends(get_db)):
    # bad credentials raise AuthenticationException -> 401 {"error": ...}
    _, access = sign_in(db, data.email, data.password)
    return TokenOut(access_token=access)


@router.get("/me", response_model=TokenUser)
def me(current: User = Depends(get_current_user)):
    return current
