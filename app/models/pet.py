from datetime import datetime

from sqlmodel import Field, SQLModel

from app.core.clock import utc_naive_now


class Pet(SQLModel, table=True):
    __tablename__ = "pets"
    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="users.id", index=True)
    name: str
    species: str
    breed: str
    age: int
    notes: str | None = None
    created_at: datetime = Field(default_factory=utc_naive_now)
