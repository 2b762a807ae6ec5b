"""
SQLAlchemy models for the photo catalog.

A Photo is a logical capture event identified by its canonical name. Each
physical variant of it (RAW, JPEG, sidecar, video) is a File. Tags, locations,
countries, cameras and lenses are reference data keyed by a natural key and
shared between photos.
"""
from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, Enum, Float, ForeignKey, Integer, String, Table, UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from photo_index.models.enums import FileType


class Base(DeclarativeBase):
    pass


photo_tags = Table(
    "photo_tags",
    Base.metadata,
    Column("photo_id", ForeignKey("photos.id"), primary_key=True),
    Column("tag_id", ForeignKey("tags.id"), primary_key=True),
)


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(primary_key=True)
    label: Mapped[str] = mapped_column(String(255), unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    def __repr__(self) -> str:
        return f"Tag({self.label!r})"


class Country(Base):
    __tablename__ = "countries"

    code: Mapped[str] = mapped_column(String(8), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)


class Location(Base):
    __tablename__ = "locations"

    # Identifier assigned by the geocoding service (e.g. "osm:way:1234")
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255))
    city: Mapped[Optional[str]] = mapped_column(String(255))
    county: Mapped[Optional[str]] = mapped_column(String(255))
    state: Mapped[Optional[str]] = mapped_column(String(255))
    country: Mapped[Optional[str]] = mapped_column(String(255))
    country_code: Mapped[Optional[str]] = mapped_column(String(8))
    category: Mapped[Optional[str]] = mapped_column(String(64))
    type: Mapped[Optional[str]] = mapped_column(String(64))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)


class Camera(Base):
    __tablename__ = "cameras"

    id: Mapped[int] = mapped_column(primary_key=True)
    model: Mapped[str] = mapped_column(String(255), default="")
    make: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    __table_args__ = (
        UniqueConstraint('model', 'make', name='uq_camera_identity'),
    )


class Lens(Base):
    __tablename__ = "lenses"

    id: Mapped[int] = mapped_column(primary_key=True)
    model: Mapped[str] = mapped_column(String(255), default="")
    make: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    __table_args__ = (
        UniqueConstraint('model', 'make', name='uq_lens_identity'),
    )


class Photo(Base):
    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Core Identity
    canonical_name: Mapped[str] = mapped_column(String(255), unique=True)
    taken_at: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True)

    # Location
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    location_id: Mapped[Optional[str]] = mapped_column(ForeignKey("locations.id"))
    country_code: Mapped[Optional[str]] = mapped_column(ForeignKey("countries.code"))

    # Camera/Lens Info
    artist: Mapped[Optional[str]] = mapped_column(String(255))
    camera_id: Mapped[Optional[int]] = mapped_column(ForeignKey("cameras.id"))
    lens_id: Mapped[Optional[int]] = mapped_column(ForeignKey("lenses.id"))
    focal_length: Mapped[Optional[int]] = mapped_column(Integer)
    aperture: Mapped[Optional[float]] = mapped_column(Float)

    # User Metadata
    title: Mapped[Optional[str]] = mapped_column(String(255))
    favorite: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)

    # Relationships
    location: Mapped[Optional[Location]] = relationship()
    country: Mapped[Optional[Country]] = relationship()
    camera: Mapped[Optional[Camera]] = relationship()
    lens: Mapped[Optional[Lens]] = relationship()
    tags: Mapped[List[Tag]] = relationship(secondary=photo_tags)
    files: Mapped[List["File"]] = relationship(back_populates="photo")

    def __repr__(self) -> str:
        return f"Photo({self.canonical_name!r}, title={self.title!r})"


class File(Base):
    __tablename__ = "files"

    id: Mapped[int] = mapped_column(primary_key=True)
    photo_id: Mapped[int] = mapped_column(ForeignKey("photos.id"), index=True)

    # File details; the path may repeat across historical moves so it is not unique
    path: Mapped[str] = mapped_column(String(1024), index=True)
    hash: Mapped[str] = mapped_column(String(64), index=True)
    type: Mapped[FileType] = mapped_column(Enum(FileType))
    mime_type: Mapped[Optional[str]] = mapped_column(String(128))
    orientation: Mapped[int] = mapped_column(Integer, default=1)
    primary: Mapped[bool] = mapped_column(Boolean, default=False)
    missing: Mapped[bool] = mapped_column(Boolean, default=False)

    # Dimensions
    width: Mapped[Optional[int]] = mapped_column(Integer)
    height: Mapped[Optional[int]] = mapped_column(Integer)
    aspect_ratio: Mapped[Optional[float]] = mapped_column(Float)

    # Color summary (JPEG only)
    main_color: Mapped[Optional[str]] = mapped_column(String(32))
    colors: Mapped[Optional[str]] = mapped_column(String(16))
    luminance: Mapped[Optional[str]] = mapped_column(String(16))
    saturation: Mapped[Optional[int]] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now, onupdate=datetime.now)

    # Relationships
    photo: Mapped[Photo] = relationship(back_populates="files")

    def __repr__(self) -> str:
        return f"File({self.path!r}, type={self.type.value if self.type else None})"
