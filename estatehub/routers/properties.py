import json
from fastapi import APIRouter, Depends, HTTPException, status, Query, Form, UploadFile, File
from sqlalchemy.orm import Session
from estatehub.core.database import get_db
from estatehub.models.user import User
from estatehub.schemas.property import (
    MediaUrlRequest, PropertyResponse, PropertyUpdate
)
from estatehub.services import properties as property_service
from estatehub.api.deps import get_current_active_user
from estatehub.utils.file_storage import (
    save_property_image, save_property_images, delete_property_image
)
from typing import List, Optional
from uuid import UUID

router = APIRouter(prefix="/properties", tags=["Properties"])


# ─── Helpers ──────────────────────────────────────────────────────────────────

def _parse_video_urls(raw: Optional[str]) -> List[str]:
    """
    Parse the 'video_urls' form field.
    Accepts a JSON array of strings or a single plain URL.
    """
    if not raw or not raw.strip():
        return []
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return [raw.strip()]

    if isinstance(parsed, str):
        parsed = [parsed]
    if not isinstance(parsed, list) or not all(isinstance(u, str) for u in parsed):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="'video_urls' must be a JSON array of URL strings.",
        )
    return [u.strip() for u in parsed if u.strip()]


# ─── CREATE: Multipart form + image uploads ───────────────────────────────────

@router.post("/", response_model=PropertyResponse, status_code=status.HTTP_201_CREATED)
async def create_property(
    # ── Required text fields ──────────────────────────────────────────────────
    title: str = Form(..., min_length=1, max_length=200),
    location: str = Form(..., min_length=1, max_length=255),
    price: float = Form(..., ge=0),

    # ── Optional text fields ──────────────────────────────────────────────────
    description: Optional[str] = Form(None),
    rooms: int = Form(0, ge=0),
    floor: int = Form(0),
    area: Optional[float] = Form(None, ge=0),
    distance_to_metro: Optional[float] = Form(None, ge=0),
    distance_to_university: Optional[float] = Form(None, ge=0),
    latitude: Optional[float] = Form(None, ge=-90, le=90),
    longitude: Optional[float] = Form(None, ge=-180, le=180),
    video_urls: Optional[str] = Form(None),             # JSON array of URLs

    # ── Image files ───────────────────────────────────────────────────────────
    images: Optional[List[UploadFile]] = File(None),

    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """
    Create a new listing. Accepts multipart/form-data with image uploads.
    New listings stay hidden from search until an admin verifies them.
    """
    property_service.ensure_can_list(current_user)

    parsed_videos = _parse_video_urls(video_urls)
    real_images = [f for f in (images or []) if f and f.filename]
    image_urls = await save_property_images(real_images) if real_images else []

    data = {
        "title": title.strip(),
        "location": location.strip(),
        "description": description,
        "price": price,
        "rooms": rooms,
        "floor": floor,
        "area": area,
        "distance_to_metro": distance_to_metro,
        "distance_to_university": distance_to_university,
        "latitude": latitude,
        "longitude": longitude,
    }
    return property_service.create_property(
        db, current_user, data, photo_urls=image_urls, video_urls=parsed_videos
    )


# ─── LIST / SEARCH (public) ───────────────────────────────────────────────────

@router.get("/", response_model=List[PropertyResponse])
async def search_properties(
    db: Session = Depends(get_db),
    keyword: Optional[str] = Query(None, description="Matches title or location"),
    min_price: Optional[float] = Query(None, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    rooms: Optional[int] = Query(None, ge=0),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
):
    """Verified, non-archived listings only."""
    return property_service.search(
        db, keyword=keyword, min_price=min_price, max_price=max_price,
        rooms=rooms, skip=skip, limit=limit,
    )


@router.get("/mine", response_model=List[PropertyResponse])
async def my_properties(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Every listing owned by the current user, including unverified and archived ones."""
    return property_service.list_by_owner(db, current_user.id)


# ─── GET single property (public) ────────────────────────────────────────────

@router.get("/{property_id}", response_model=PropertyResponse)
async def get_property(property_id: UUID, db: Session = Depends(get_db)):
    """Public, no auth required. Increments view count."""
    return property_service.view_property(db, property_id)


# ─── UPDATE / ARCHIVE / DELETE ────────────────────────────────────────────────

@router.put("/{property_id}", response_model=PropertyResponse)
async def update_property(
    property_id: UUID,
    updates: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return property_service.update_property(
        db, property_id, current_user, updates.model_dump(exclude_unset=True)
    )


@router.post("/{property_id}/archive", response_model=PropertyResponse)
async def archive_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return property_service.archive_property(db, property_id, current_user, archived=True)


@router.post("/{property_id}/unarchive", response_model=PropertyResponse)
async def unarchive_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return property_service.archive_property(db, property_id, current_user, archived=False)


@router.delete("/{property_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_property(
    property_id: UUID,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    for url in property_service.delete_property(db, property_id, current_user):
        delete_property_image(url)


# ─── Media ────────────────────────────────────────────────────────────────────

@router.post("/{property_id}/photos", response_model=PropertyResponse)
async def upload_photo(
    property_id: UUID,
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    # Ownership is checked before the file hits the disk
    property_service.check_can_modify(db, property_id, current_user)
    url = await save_property_image(file)
    return property_service.add_photo(db, property_id, current_user, url)


@router.delete("/{property_id}/photos/{index}", response_model=dict)
async def remove_photo(
    property_id: UUID,
    index: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    url = property_service.remove_photo(db, property_id, current_user, index)
    delete_property_image(url)
    return {"removed": url}


@router.post("/{property_id}/videos", response_model=PropertyResponse)
async def add_video(
    property_id: UUID,
    payload: MediaUrlRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Videos are stored as external URLs only (YouTube / Vimeo)."""
    return property_service.add_video(db, property_id, current_user, payload.url.strip())


@router.delete("/{property_id}/videos/{index}", response_model=dict)
async def remove_video(
    property_id: UUID,
    index: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    url = property_service.remove_video(db, property_id, current_user, index)
    return {"removed": url}
