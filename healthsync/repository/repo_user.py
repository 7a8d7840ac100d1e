from typing import Optional
from uuid import UUID
from fastapi import Depends
from sqlalchemy.orm import Session
from healthsync.db.base import get_db
from healthsync.models.model_user import User
from healthsync.repository.repo_base import save

class UserRepository:
    def __init__(self, db_session: Session = Depends(get_db)):
        self.db = db_session

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_id(self, user_id: UUID) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def create(self, user_data: User) -> User:
        return save(self.db, user_data)

    def update(self, user: User) -> User:
        return save(self.db, user, add=False)
