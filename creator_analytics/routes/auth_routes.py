from typing import Optional
from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from creator_analytics.models.user import User
from creator_analytics.services.auth_service import login_user, register_user
from creator_analytics.services.user_store import UserStore
from creator_analytics.utils.auth import get_current_user
from creator_analytics.utils.dependencies import ensure_db, get_user_store
from creator_analytics.utils.serializers import serialize_user

router = APIRouter(prefix="/api/auth", tags=["Auth"], dependencies=[Depends(ensure_db)])

class RegisterRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""
    role: Optional[str] = None

class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""

@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    users: UserStore = Depends(get_user_store),
):
    token, user = await register_user(
        users,
        name=req.name.strip(),
        email=req.email.strip(),
        password=req.password,
        role=req.role,
    )
    return {"token": token, "user": serialize_user(user)}

@router.post("/login")
async def login(
    req: LoginRequest,
    users: UserStore = Depends(get_user_store),
):
    token, user = await login_user(users, email=req.email.strip(), password=req.password)
    return {"token": token, "user": serialize_user(user)}

@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return {"user": serialize_user(user)}

@router.post("/logout")
async def logout():
    # Tokens are stateless; the client drops its copy.
    return {"ok": True}
