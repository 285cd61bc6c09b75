# routers/user.py
from fastapi import APIRouter, HTTPException
from nextgenfit.schemas.user import UserSignup, UserLogin
from nextgenfit.crud.user import verify_user, create_user
from nextgenfit.utils.jwt_handler import create_access_token

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/signup")
async def signup(user: UserSignup):
    success = await create_user(user)
    if not success:
        raise HTTPException(status_code=400, detail="User id already exists.")

    access_token = create_access_token(data={"sub": user.user_id})
    return {
        "message": f"Welcome, {user.user_id}!",
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.post("/login")
async def login(user: UserLogin):
    is_valid = await verify_user(user.user_id)
    if not is_valid:
        raise HTTPException(status_code=404, detail="Unknown user.")

    access_token = create_access_token(data={"sub": user.user_id})
    return {
        "access_token": access_token,
        "token_type": "bearer",
    }
