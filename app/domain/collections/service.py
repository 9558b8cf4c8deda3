"""Collection service - favorites, comparison list and saved searches"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Comparison, Favorite, Property, SavedSearch, User
from ..properties.repository import PropertyRepository
from .repository import CollectionRepository
from .schemas import MAX_COMPARISON_PROPERTIES, SavedSearchCreate, SavedSearchUpdate

logger = logging.getLogger(__name__)


class CollectionService:
    """Service layer for a user's personal collections"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = CollectionRepository()

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except Exception as e:
            self.db.rollback()
            logger.error(f"❌ Failed to {action}: {e}")
            raise

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    def list_favorites(self, user: User) -> list[Favorite]:
        return self.repo.list_favorites(self.db, user.id)

    def add_favorite(self, user: User, property_id: int) -> Favorite:
        existing = self.repo.get_favorite(self.db, user.id, property_id)
        if existing:
            return existing

        favorite = Favorite(user_id=user.id, property_id=property_id)
        self.db.add(favorite)
        self._commit("add favorite")
        self.db.refresh(favorite)
        logger.info(f"✅ User {user.id} favorited property {property_id}")
        return favorite

    def remove_favorite(self, user: User, property_id: int) -> None:
        self.repo.delete_favorite(self.db, user.id, property_id)

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def list_comparison(self, user: User) -> list[Property]:
        """Compared properties in the order they were added"""
        comparison = self.repo.get_comparison(self.db, user.id)
        if not comparison or not comparison.property_ids:
            return []

        found = {p.id: p for p in PropertyRepository.get_many(self.db, comparison.property_ids)}
        return [found[pid] for pid in comparison.property_ids if pid in found]

    def add_to_comparison(self, user: User, property_id: int) -> list[int]:
        """Duplicates and additions past the limit are ignored"""
        comparison = self.repo.get_comparison(self.db, user.id)
        if not comparison:
            comparison = Comparison(user_id=user.id, property_ids=[property_id])
            self.db.add(comparison)
        else:
            ids = list(comparison.property_ids or [])
            if property_id not in ids and len(ids) < MAX_COMPARISON_PROPERTIES:
                # Reassign so the JSON column change is detected
                comparison.property_ids = ids + [property_id]

        self._commit("update comparison")
        return list(comparison.property_ids)

    def remove_from_comparison(self, user: User, property_id: int) -> list[int]:
        comparison = self.repo.get_comparison(self.db, user.id)
        if not comparison:
            return []

        ids = [pid for pid in (comparison.property_ids or []) if pid != property_id]
        if ids:
            comparison.property_ids = ids
        else:
            self.db.delete(comparison)
        self._commit("update comparison")
        return ids

    def clear_comparison(self, user: User) -> None:
        comparison = self.repo.get_comparison(self.db, user.id)
        if comparison:
            self.db.delete(comparison)
            self._commit("clear comparison")

    # ------------------------------------------------------------------
    # Saved searches
    # ------------------------------------------------------------------

    def list_saved_searches(self, user: User) -> list[SavedSearch]:
        return self.repo.list_saved_searches(self.db, user.id)

    def get_saved_search(self, user: User, search_id: int) -> SavedSearch:
        search = self.repo.get_saved_search(self.db, search_id, user.id)
        if not search:
            raise HTTPException(status_code=404, detail="Saved search not found")
        return search

    def create_saved_search(self, user: User, data: SavedSearchCreate) -> SavedSearch:
        search = SavedSearch(
            user_id=user.id,
            name=data.name,
            min_price=data.min_price,
            max_price=data.max_price,
            bedrooms=data.bedrooms,
            bathrooms=data.bathrooms,
            property_type=data.property_type,
            amenities=data.amenities or [],
        )
        self.db.add(search)
        self._commit("create saved search")
        self.db.refresh(search)
        logger.info(f"✅ Saved search {search.id} created for user {user.id}")
        return search

    def update_saved_search(self, user: User, search_id: int, data: SavedSearchUpdate) -> SavedSearch:
        search = self.get_saved_search(user, search_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            setattr(search, key, value)
        self._commit("update saved search")
        self.db.refresh(search)
        return search

    def delete_saved_search(self, user: User, search_id: int) -> None:
        self.repo.delete_saved_search(self.db, search_id, user.id)
