"""User records for authenticated callers."""

import logging

from sqlalchemy.orm import Session

from src.db.models import User, utc_now_iso

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = (
    "email",
    "first_name",
    "last_name",
    "profile_image_url",
    "business_name",
    "business_type",
    "instagram_url",
)


class UserService:
    """Lookup and upsert of User rows.

    Args:
        db: SQLAlchemy session (sync).
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_user(self, user_id: str) -> User | None:
        return self._db.get(User, user_id)

    def upsert_user(self, user_id: str, **fields: str | None) -> User:
        """Create the user if missing, otherwise update the given fields.

        Args:
            user_id: External user identifier.
            **fields: Profile fields to set; None values are ignored.

        Returns:
            The persisted User.
        """
        unknown = set(fields) - set(_UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown user fields: {sorted(unknown)}")

        user = self._db.get(User, user_id)
        if user is None:
            user = User(id=user_id)
            self._db.add(user)
            logger.info("Created user %s", user_id)
        for name, value in fields.items():
            if value is not None:
                setattr(user, name, value)
        user.updated_at = utc_now_iso()
        self._db.commit()
        return user
