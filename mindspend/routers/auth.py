import logging

from fastapi import APIRouter, Depends, HTTPException, status

from mindspend.core.security import create_access_token, get_current_user_id, get_password_hash, verify_password
from mindspend.db.base import PROFILES, Repository
from mindspend.db.repository import get_repository
from mindspend.models.user import UserCreate, UserInDB, UserLogin, UserPublic

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def register(user: UserCreate, repo: Repository = Depends(get_repository)):
    existing = repo.get_user_by_email(user.email)
    if existing:
        raise HTTPException(status_code=400, detail="User already exists")

    user_db = UserInDB(email=user.email, password_hash=get_password_hash(user.password))
    if not repo.put_user(user_db.model_dump()):
        raise HTTPException(status_code=500, detail="Error saving user")

    repo.upsert_record(PROFILES, user_db.user_id, {"display_name": user.display_name or user.email.split("@")[0]})
    logger.info(f"Registered user {user_db.user_id}")
    return UserPublic(**user_db.model_dump())


@router.post("/login")
def login(login_data: UserLogin, repo: Repository = Depends(get_repository)):
    user = repo.get_user_by_email(login_data.email)
    if not user or not verify_password(login_data.password, user["password_hash"]):
        logger.warning(f"Failed login for {login_data.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": user["user_id"]})
    return {
        "access_token": access_token,
        "token_type": "bearer",
        "user": UserPublic(**user).model_dump(),
    }


@router.get("/me", response_model=UserPublic)
def get_current_user(user_id: str = Depends(get_current_user_id), repo: Repository = Depends(get_repository)):
    """Get current user"""
    user = repo.get_user_by_id(user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserPublic(**user)
