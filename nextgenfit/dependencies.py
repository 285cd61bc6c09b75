# nextgenfit/dependencies.py

from fastapi import Depends, Header, HTTPException
from fastapi.security import OAuth2PasswordBearer

from nextgenfit.core import config
from nextgenfit.crud.profile import ProfileStore
from nextgenfit.crud.routine import RoutinePersistence
from nextgenfit.database import database
from nextgenfit.utils.jwt_handler import decode_user_id
from nextgenfit.utils.llm_client import GenerateFn, get_generate_fn
from nextgenfit.utils.local_cache import LocalCache

# 토큰이 없으면 익명 세션으로 취급
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="users/login", auto_error=False)


async def get_optional_user(token: str | None = Depends(oauth2_scheme)) -> str | None:
    if not token:
        return None
    user_id = decode_user_id(token)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"})
    return user_id


async def get_current_user(user_id: str | None = Depends(get_optional_user)) -> dict:
    if user_id is None:
        raise HTTPException(status_code=401, detail="Not authenticated", headers={"WWW-Authenticate": "Bearer"})
    return {"user_id": user_id}


def get_local_cache(
    x_client_id: str | None = Header(None),
    user_id: str | None = Depends(get_optional_user),
) -> LocalCache | None:
    # 클라이언트 식별이 없으면 로컬 캐시도 없음 (공용 네임스페이스 금지)
    if x_client_id:
        return LocalCache(config.LOCAL_CACHE_DIR, f"client-{x_client_id}")
    if user_id:
        return LocalCache(config.LOCAL_CACHE_DIR, f"user-{user_id}")
    return None


def get_profile_store() -> ProfileStore:
    return ProfileStore(database)


def get_persistence(
    local: LocalCache | None = Depends(get_local_cache),
    store: ProfileStore = Depends(get_profile_store),
    user_id: str | None = Depends(get_optional_user),
) -> RoutinePersistence:
    return RoutinePersistence(
        local,
        store,
        user_id=user_id,
        write_policy=config.REMOTE_WRITE_POLICY,
        read_policy=config.ROUTINE_READ_POLICY,
    )


def get_generator() -> GenerateFn:
    return get_generate_fn(config.GENERATION_PROVIDER)
