from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from store_ratings.api.deps import get_db, get_principal
from store_ratings.core.errors import AuthError
from store_ratings.core.security import create_access_token
from store_ratings.db.models.user import User
from store_ratings.db.repositories.users import get_user
from store_ratings.schemas.auth import LoginRequest, PasswordUpdateRequest, RegisterRequest, TokenResponse
from store_ratings.schemas.common import MessageResponse
from store_ratings.schemas.user import UserRead
from store_ratings.services import users as user_service
from store_ratings.services.identity import Principal

router = APIRouter(prefix="/auth", tags=["Auth"])

def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(user.id),
        user=user_service.to_user_read(user),
    )

@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: Session=Depends(get_db)):
    user = user_service.register_user(db, payload)
    return _token_response(user)

@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session=Depends(get_db)):
    user = user_service.authenticate(db, payload.email, payload.password)
    return _token_response(user)

@router.get("/me", response_model=UserRead)
def me(principal: Principal=Depends(get_principal), db: Session=Depends(get_db)):
    user = get_user(db, principal.id)
    if user is None:
        raise AuthError("Invalid token")
    return user_service.to_user_read(user)

@router.put("/password", response_model=MessageResponse)
def update_password(
    payload: PasswordUpdateRequest,
    principal: Principal=Depends(get_principal),
    db: Session=Depends(get_db),
):
    user_service.change_password(db, principal, payload.current_password, payload.new_password)
    return MessageResponse(message="Password updated successfully")
