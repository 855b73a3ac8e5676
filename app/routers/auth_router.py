from fastapi import APIRouter, HTTPException, Depends, Request, BackgroundTasks
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import Optional

from app.core.database import get_db
from app.core.security import get_current_user
from app.services.auth_service import AuthService
from app.services.activity_service import ActivityService
from app.models.user import User

router = APIRouter()

class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=8)
    username: Optional[str] = None

class LoginRequest(BaseModel):
    email: str
    password: str

@router.post("/register")
def register(request: RegisterRequest, db: Session = Depends(get_db)):
    user = AuthService.register_user(request.email, request.password, db, username=request.username)
    return {"message": "Registration successful, please log in", "userId": user.id}

@router.post("/login")
def login(request: LoginRequest, req: Request, background_tasks: BackgroundTasks, db: Session = Depends(get_db)):
    user = AuthService.authenticate_user(request.email, request.password, db)
    if not user:
        ActivityService.log(
            action="LOGIN_FAILED",
            entity_type="user",
            details={"email": request.email},
            request=req,
            background_tasks=background_tasks
        )
        raise HTTPException(status_code=401, detail="Invalid credentials")

    ActivityService.log(
        action="LOGIN",
        entity_type="user",
        entity_id=user.id,
        user_id=user.id,
        request=req,
        background_tasks=background_tasks
    )
    return {
        "message": "Login successful",
        **AuthService.generate_tokens(user.email),
        "user": {"id": user.id, "email": user.email, "username": user.username}
    }

@router.get("/me")
def me(current_user: User = Depends(get_current_user)):
    return {"id": current_user.id, "email": current_user.email, "username": current_user.username}
