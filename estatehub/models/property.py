from sqlalchemy import Column, String, Integer, Float, Boolean, Text, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from estatehub.models.base import BaseModel

class Property(BaseModel):
    __tablename__ = "properties"

    # Basic Info
    title = Column(String(200), nullable=False)
    location = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    price = Column(Float, nullable=False)
    rooms = Column(Integer, default=0, nullable=False)
    floor = Column(Integer, default=0, nullable=False)
    area = Column(Float, nullable=True)  # square meters

    # Geo
    distance_to_metro = Column(Float, nullable=True)  # km
    distance_to_university = Column(Float, nullable=True)  # km
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Moderation: public search shows only verified, unarchived listings
    is_verified = Column(Boolean, default=False, nullable=False)
    is_archived = Column(Boolean, default=False, nullable=False)

    rating_average = Column(Float, default=0.0, nullable=False)
    rating_count = Column(Integer, default=0, nullable=False)
    view_count = Column(Integer, default=0, nullable=False)

    # Relationships
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    owner = relationship(
        "User",
        back_populates="properties",
        foreign_keys=[owner_id]
    )
    photos = relationship(
        "PropertyPhoto",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyPhoto.display_order",
    )
    videos = relationship(
        "PropertyVideo",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="PropertyVideo.display_order",
    )

class PropertyPhoto(BaseModel):
    __tablename__ = "property_photos"

    property_id = Column(Uuid(as_uuid=True), ForeignKey("properties.id"), nullable=False)
    url = Column(String(255), nullable=False)
    display_order = Column(Integer, default=0)

    property = relationship("Property", back_populates="photos")

class PropertyVideo(BaseModel):
    __tablename__ = "property_videos"

    property_id = Column(Uuid(as_uuid=True), ForeignKey("properties.id"), nullable=False)
    url = Column(String(500), nullable=False)
    display_order = Column(Integer, default=0)

    property = relationship("Property", back_populates="videos")
