from pydantic import Field
from shipyard.schemas.base import APIModel


class UserBase(APIModel):
    username: str = Field(min_length=1)
    email: str


# Properties to receive on creation
class UserCreate(UserBase):
    password: str = Field(min_length=1)


class User(UserBase):
    id: int
    password: str
