from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from fintrack.database.connection import get_db
from fintrack.repositories import user_crud
from fintrack.schemas import general_schema, user_schema
from fintrack.security.user_security import (
    authenticate_user,
    create_access_token,
    get_current_user,
    oauth2_scheme,
    verify_token,
)

user_Router = APIRouter(prefix="/user")


@user_Router.post(
    "/create", response_model=general_schema.RegisterResponse, tags=["users"]
)
def create_user(user: user_schema.UserCreate, db: Session = Depends(get_db)):
    if user_crud.get_user_by_username(db=db, username=user.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )
    if user_crud.get_user_by_email(db=db, email=user.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    user_crud.create_user(db=db, user=user)
    return {"message": "user created successfully"}


@user_Router.post(
    "/login", response_model=user_schema.TokenResponse, tags=["users"]
)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)
):
    user = authenticate_user(form_data.username, form_data.password, db)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = create_access_token(user=user)
    return {"access_token": access_token, "token_type": "bearer"}


@user_Router.post(
    "/verify-token", response_model=general_schema.MessageResponse, tags=["users"]
)
def verify_user_token(
    token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)
):
    verify_token(token=token, db=db)
    return {"message": "token is valid"}


@user_Router.get("/me", response_model=user_schema.User, tags=["users"])
def get_me(user: user_schema.User = Depends(get_current_user)):
    return user
