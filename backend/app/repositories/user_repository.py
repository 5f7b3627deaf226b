"""
User Repository - read access to user accounts
"""
from typing import Optional

from app.core.database import Database
from app.domain.user import User


class UserRepository:
    """Repository for User lookups"""

    def __init__(self, db: Database):
        self.db = db

    def find_by_id(self, user_id: int) -> Optional[User]:
        """
        Find user by ID

        Returns:
            User or None if not found
        """
        with self.db.transaction() as cursor:
            cursor.execute("""
                SELECT id, name, email, address, role
                FROM users
                WHERE id = %s
            """, (user_id,))
            row = cursor.fetchone()
            return User(**row) if row else None
