from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User, UserCreate, UserPublic, UserRole


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    user = User(
        email=data.email,
        name=data.name,
        role=data.role,
        hashed_password=hash_password(data.password),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


def user_to_public(user: User) -> UserPublic:
    return UserPublic(id=user.id, email=user.email, name=user.name, role=user.role)


def make_access_token(user: User) -> tuple[str, int]:
    access = create_access_token(user.id, UserRole(user.role).value)
    expires_in = settings.access_token_expire_minutes * 60
    return access, expires_in


async def login_user(
    session: AsyncSession, email: str, password: str
) -> tuple[User, str, int] | None:
    user = await get_user_by_email(session, email)
    if not user or not user.hashed_password:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    access, expires_in = make_access_token(user)
    return user, access, expires_in


async def signup_user(session: AsyncSession, data: UserCreate) -> tuple[User, str, int] | None:
    existing = await get_user_by_email(session, data.email)
    if existing:
        return None
    user = await create_user(session, data)
    access, expires_in = make_access_token(user)
    return user, access, expires_in
