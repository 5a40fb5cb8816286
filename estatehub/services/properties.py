"""Property listings: CRUD, moderation flags, media lists and public search."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from estatehub.core.exceptions import NotFound, PermissionDenied
from estatehub.models.property import Property, PropertyPhoto, PropertyVideo
from estatehub.models.user import User, UserRole

logger = logging.getLogger(__name__)

LISTING_ROLES = frozenset({UserRole.SELLER, UserRole.AGENT, UserRole.ADMIN})

EDITABLE_FIELDS = (
    "title", "location", "description", "price", "rooms", "floor", "area",
    "distance_to_metro", "distance_to_university", "latitude", "longitude",
)


def _check_owner_or_admin(prop: Property, user: User) -> None:
    if prop.owner_id != user.id and user.role != UserRole.ADMIN:
        raise PermissionDenied("You can only modify your own properties.")


def ensure_can_list(user: User) -> None:
    if user.role not in LISTING_ROLES:
        raise PermissionDenied("Only sellers and agents can list properties.")


def get_property(db: Session, property_id: UUID) -> Property:
    prop = db.get(Property, property_id)
    if prop is None:
        raise NotFound("Property not found.")
    return prop


def check_can_modify(db: Session, property_id: UUID, user: User) -> Property:
    prop = get_property(db, property_id)
    _check_owner_or_admin(prop, user)
    return prop


def view_property(db: Session, property_id: UUID) -> Property:
    """Public detail view; bumps the view counter."""
    prop = get_property(db, property_id)
    prop.view_count = (prop.view_count or 0) + 1
    db.commit()
    db.refresh(prop)
    return prop


def create_property(
    db: Session,
    owner: User,
    data: dict,
    photo_urls: Optional[List[str]] = None,
    video_urls: Optional[List[str]] = None,
) -> Property:
    ensure_can_list(owner)

    prop = Property(
        owner_id=owner.id,
        is_verified=False,
        is_archived=False,
        **{k: v for k, v in data.items() if k in EDITABLE_FIELDS},
    )
    db.add(prop)
    db.flush()  # get prop.id before adding children

    for idx, url in enumerate(photo_urls or []):
        db.add(PropertyPhoto(property_id=prop.id, url=url, display_order=idx))
    for idx, url in enumerate(video_urls or []):
        db.add(PropertyVideo(property_id=prop.id, url=url, display_order=idx))

    db.commit()
    db.refresh(prop)
    logger.info("Property %s listed by %s", prop.id, owner.email)
    return prop


def update_property(db: Session, property_id: UUID, user: User, updates: dict) -> Property:
    prop = check_can_modify(db, property_id, user)
    for field in EDITABLE_FIELDS:
        if field in updates and updates[field] is not None:
            setattr(prop, field, updates[field])
    db.commit()
    db.refresh(prop)
    return prop


def archive_property(db: Session, property_id: UUID, user: User, archived: bool = True) -> Property:
    prop = check_can_modify(db, property_id, user)
    prop.is_archived = archived
    db.commit()
    db.refresh(prop)
    return prop


def delete_property(db: Session, property_id: UUID, user: User) -> List[str]:
    """Delete the listing; returns the media URLs so callers can remove files."""
    prop = check_can_modify(db, property_id, user)
    urls = [p.url for p in prop.photos]
    db.delete(prop)
    db.commit()
    logger.info("Property %s deleted by %s", property_id, user.email)
    return urls


def verify_property(db: Session, property_id: UUID) -> Property:
    prop = get_property(db, property_id)
    prop.is_verified = True
    db.commit()
    db.refresh(prop)
    logger.info("Property %s verified", property_id)
    return prop


def reject_property(db: Session, property_id: UUID) -> List[str]:
    """Rejected listings are removed outright."""
    prop = get_property(db, property_id)
    urls = [p.url for p in prop.photos]
    db.delete(prop)
    db.commit()
    logger.info("Property %s rejected", property_id)
    return urls


def list_properties(db: Session) -> List[Property]:
    return db.query(Property).order_by(Property.created_at.desc()).all()


def list_unverified(db: Session) -> List[Property]:
    return (
        db.query(Property)
        .filter(Property.is_verified.is_(False))
        .order_by(Property.created_at.desc())
        .all()
    )


def list_by_owner(db: Session, owner_id: UUID) -> List[Property]:
    return (
        db.query(Property)
        .filter(Property.owner_id == owner_id)
        .order_by(Property.created_at.desc())
        .all()
    )


def search(
    db: Session,
    keyword: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    rooms: Optional[int] = None,
    skip: int = 0,
    limit: int = 20,
) -> List[Property]:
    """Public search: only verified listings that are not archived."""
    query = db.query(Property).filter(
        Property.is_archived.is_(False),
        Property.is_verified.is_(True),
    )

    if keyword and keyword.strip():
        term = f"%{keyword.strip().lower()}%"
        query = query.filter(
            or_(
                func.lower(Property.title).like(term),
                func.lower(Property.location).like(term),
            )
        )
    if min_price is not None:
        query = query.filter(Property.price >= min_price)
    if max_price is not None:
        query = query.filter(Property.price <= max_price)
    if rooms is not None:
        query = query.filter(Property.rooms == rooms)

    return query.order_by(Property.created_at.desc()).offset(skip).limit(limit).all()


# ─── Media lists ──────────────────────────────────────────────────────────────

def _append_media(db: Session, prop: Property, model, items: list, url: str) -> Property:
    db.add(model(property_id=prop.id, url=url, display_order=len(items)))
    db.commit()
    db.refresh(prop)
    return prop


def _remove_media(db: Session, prop: Property, items: list, index: int) -> str:
    if index < 0 or index >= len(items):
        raise NotFound("Media index out of range.")
    # delete-orphan cascade removes the row once it leaves the collection
    url = items.pop(index).url
    for position, item in enumerate(items):
        item.display_order = position
    db.commit()
    db.refresh(prop)
    return url


def add_photo(db: Session, property_id: UUID, user: User, url: str) -> Property:
    prop = check_can_modify(db, property_id, user)
    return _append_media(db, prop, PropertyPhoto, prop.photos, url)


def remove_photo(db: Session, property_id: UUID, user: User, index: int) -> str:
    prop = check_can_modify(db, property_id, user)
    return _remove_media(db, prop, prop.photos, index)


def add_video(db: Session, property_id: UUID, user: User, url: str) -> Property:
    prop = check_can_modify(db, property_id, user)
    return _append_media(db, prop, PropertyVideo, prop.videos, url)


def remove_video(db: Session, property_id: UUID, user: User, index: int) -> str:
    prop = check_can_modify(db, property_id, user)
    return _remove_media(db, prop, prop.videos, index)
