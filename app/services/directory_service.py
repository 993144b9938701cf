from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.models.pet import Pet
from app.models.user import User, UserRole


async def get_pet(session: AsyncSession, pet_id: int) -> Pet:
    result = await session.execute(select(Pet).where(Pet.id == pet_id))
    pet = result.scalar_one_or_none()
    if not pet:
        raise NotFoundError("Pet not found")
    return pet


async def list_groomers(session: AsyncSession) -> list[User]:
    result = await session.execute(
        select(User).where(User.role == UserRole.groomer).order_by(User.name)
    )
    return list(result.scalars().all())


async def get_groomer(session: AsyncSession, groomer_id: int) -> User:
    result = await session.execute(
        select(User).where(User.id == groomer_id, User.role == UserRole.groomer)
    )
    groomer = result.scalar_one_or_none()
    if not groomer:
        raise NotFoundError("Groomer not found")
    return groomer
