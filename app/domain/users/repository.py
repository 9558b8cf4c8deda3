"""User repository - Database operations for user accounts"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import User


class UserRepository:
    """Repository for user database operations"""

    @staticmethod
    def get_by_open_id(db: Session, open_id: str) -> Optional[User]:
        return db.query(User).filter(User.open_id == open_id).first()

    @staticmethod
    def get_by_email(db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    @staticmethod
    def upsert(
        db: Session,
        open_id: str,
        last_signed_in: datetime,
        owner_open_id: Optional[str] = None,
        **fields,
    ) -> User:
        """
        Insert or update a user keyed by open_id.
        Only the fields passed are written. The owner identity is always (re)promoted to admin
        unless an explicit role is given; nobody is ever demoted here.
        """
        user = UserRepository.get_by_open_id(db, open_id)
        if not user:
            user = User(open_id=open_id, role="user")
            db.add(user)

        for key, value in fields.items():
            setattr(user, key, value)
        user.last_signed_in = last_signed_in

        if "role" not in fields and owner_open_id and open_id == owner_open_id:
            user.role = "admin"

        db.commit()
        db.refresh(user)
        return user
