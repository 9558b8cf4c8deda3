"""Collection repository - every query is scoped to one user"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Comparison, Favorite, SavedSearch


class CollectionRepository:
    """Repository for favorites, comparisons and saved searches"""

    # Favorites

    @staticmethod
    def list_favorites(db: Session, user_id: int) -> list[Favorite]:
        return (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id)
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
            .all()
        )

    @staticmethod
    def get_favorite(db: Session, user_id: int, property_id: int) -> Optional[Favorite]:
        return (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id, Favorite.property_id == property_id)
            .first()
        )

    @staticmethod
    def delete_favorite(db: Session, user_id: int, property_id: int) -> int:
        deleted = (
            db.query(Favorite)
            .filter(Favorite.user_id == user_id, Favorite.property_id == property_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted

    # Comparisons

    @staticmethod
    def get_comparison(db: Session, user_id: int) -> Optional[Comparison]:
        return db.query(Comparison).filter(Comparison.user_id == user_id).first()

    # Saved searches

    @staticmethod
    def list_saved_searches(db: Session, user_id: int) -> list[SavedSearch]:
        return (
            db.query(SavedSearch)
            .filter(SavedSearch.user_id == user_id)
            .order_by(SavedSearch.id)
            .all()
        )

    @staticmethod
    def get_saved_search(db: Session, search_id: int, user_id: int) -> Optional[SavedSearch]:
        return (
            db.query(SavedSearch)
            .filter(SavedSearch.id == search_id, SavedSearch.user_id == user_id)
            .first()
        )

    @staticmethod
    def delete_saved_search(db: Session, search_id: int, user_id: int) -> int:
        deleted = (
            db.query(SavedSearch)
            .filter(SavedSearch.id == search_id, SavedSearch.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted
