from typing import Optional
from sqlalchemy.orm import Session
from shipyard.models.user import User
from shipyard.schemas.user import UserCreate


def get(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)


def get_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def create(db: Session, *, obj_in: UserCreate) -> User:
    db_obj = User(
        username=obj_in.username,
        password=obj_in.password,
        email=obj_in.email,
    )
    db.add(db_obj)
    db.flush()
    return db_obj
