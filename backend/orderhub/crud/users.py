from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from orderhub.core.errors import DuplicateEmail
from orderhub.models.users import User


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_user(db: Session, user_id: int) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


# The unique index on email is the source of truth for duplicates, so
# two concurrent registrations cannot both win.
def create_user(db: Session, email: str, password_hash: str) -> User:
    user = User(email=email, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmail() from exc
    db.refresh(user)
    return user
