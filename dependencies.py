from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session

from db import SessionLocal


@contextmanager
def session_scope() -> Iterator[Session]:
    """Session for work outside a request, such as startup seeding."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db() -> Generator[Session, None, None]:
    with session_scope() as db:
        yield db
