import re

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi_users import exceptions
from fastapi_users.authentication import JWTStrategy
from sqlalchemy.exc import IntegrityError

from qios.auth.backend import get_current_user, get_jwt_strategy, get_user_manager
from qios.auth.manager import UserManager
from qios.models.user import User
from qios.schemas.user import LoginRequest, RegisterRequest, UserCreate, UserRead

router = APIRouter(prefix="/api/auth", tags=["auth"])

USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,50}$")


@router.post("/login")
async def login(
    payload: LoginRequest,
    user_manager: UserManager = Depends(get_user_manager),
    strategy: JWTStrategy = Depends(get_jwt_strategy),
):
    username = payload.username.strip()
    if not username or not payload.password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    # Malformed usernames get the same answer as wrong passwords
    if not USERNAME_RE.fullmatch(username):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    user = await user_manager.authenticate_username(username, payload.password)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = await strategy.write_token(user)
    return {
        "success": True,
        "data": {
            "token": token,
            "user": {"id": str(user.id), "username": user.username, "storeId": user.store_id},
        },
    }


@router.post("/register", status_code=201)
async def register(
    request: Request,
    payload: RegisterRequest,
    user_manager: UserManager = Depends(get_user_manager),
):
    if await user_manager.get_by_username(payload.username):
        raise HTTPException(status_code=400, detail="Username or email already in use")

    try:
        user = await user_manager.create(
            UserCreate(
                username=payload.username,
                email=payload.email,
                password=payload.password,
                store_id=payload.store_id,
            ),
            safe=True,
            request=request,
        )
    except (exceptions.UserAlreadyExists, IntegrityError):
        raise HTTPException(status_code=400, detail="Username or email already in use")
    except exceptions.InvalidPasswordException as e:
        raise HTTPException(status_code=400, detail=str(e.reason))

    return {
        "success": True,
        "data": {"id": str(user.id), "username": user.username, "email": user.email},
    }


@router.get("/me", response_model=UserRead)
async def whoami(user: User = Depends(get_current_user)):
    return user
