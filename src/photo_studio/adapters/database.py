"""Database engine, session factory and table definitions."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Engine, Enum, Integer, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from photo_studio.domain.photos import PhotoCategory, PhotoStatus, PrizeMedal


class Base(DeclarativeBase):
    pass


def _enum(enum_cls: type, name: str) -> Enum:
    return Enum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class PhotoRow(Base):
    """Photo metadata; the image files live in object storage."""

    __tablename__ = "photo"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    s3_key: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(Text)
    alt: Mapped[str | None] = mapped_column(Text)
    published: Mapped[bool | None] = mapped_column(Boolean)
    status: Mapped[PhotoStatus] = mapped_column(
        _enum(PhotoStatus, "photo_status"),
        nullable=False,
        default=PhotoStatus.PROCESSING,
    )
    category: Mapped[PhotoCategory | None] = mapped_column(
        _enum(PhotoCategory, "photo_category")
    )
    has_prize: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    prize_title: Mapped[str | None] = mapped_column(Text)
    prize_medal: Mapped[PrizeMedal | None] = mapped_column(
        _enum(PrizeMedal, "medal_type")
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class PriceListRow(Base):
    """Price-list metadata; the PDF lives in object storage."""

    __tablename__ = "price_list"

    id: Mapped[str] = mapped_column(Text, primary_key=True)
    s3_key: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[str | None] = mapped_column(Text)
    alt: Mapped[str | None] = mapped_column(Text)
    original_name: Mapped[str | None] = mapped_column(Text)
    file_size: Mapped[int | None] = mapped_column(Integer)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


def create_db_engine(database_url: str, pool_size: int = 5) -> Engine:
    """Create an engine; SQLite URLs share one connection across threads."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(database_url, pool_size=pool_size, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Return a session factory whose sessions keep loaded state after commit."""
    return sessionmaker(bind=engine, expire_on_commit=False)


def init_db(engine: Engine) -> None:
    """Create tables that do not exist yet."""
    Base.metadata.create_all(engine)
