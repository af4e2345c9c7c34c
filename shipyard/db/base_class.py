from typing import Any

from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
    id: Any

    # Generate __tablename__ automatically
    @declared_attr.directive
    def __tablename__(cls) -> str:
        return cls.__name__.lower()

    # SQLite otherwise hands the highest deleted rowid out again
    @declared_attr.directive
    def __table_args__(cls) -> dict:
        return {"sqlite_autoincrement": True}
