"""Domain models for admin-managed content."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class NewsArticle:
    """A news article shown on the public site."""

    id: str
    title: str
    description: str
    published_on: date | None
    image_url: str
    content: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Sport:
    """A sport offered by the community."""

    id: str
    name: str
    image_url: str
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class LiveMatch:
    """A match with an optional live stream."""

    id: str
    title: str
    status: str
    image_url: str
    stream_url: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Product:
    """A merchandise item listed in the store."""

    id: str
    name: str
    price: str
    image_url: str
    description: str | None
    stock: int | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class CommunityHighlight:
    """An image or video highlight from the community."""

    id: str
    title: str
    media_url: str
    media_type: str
    description: str | None
    happened_on: date | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Registration:
    """A member's request to take part in a tournament."""

    id: str
    tournament_id: str
    tournament_name: str
    user_id: str
    user_name: str
    user_email: str | None
    registered_at: datetime | None
    status: str
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Tournament:
    """A tournament listed on the site."""

    id: str
    name: str
    starts_on: date | None
    time: str | None
    location: str
    venue: str | None
    image_url: str
    status: str
    description: str | None
    rules: str | None
    prize_pool: str | None
    max_participants: int | None
    registration_deadline: str | None
    contact_info: str | None
    registration_fee: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Player:
    """A player profile listed under a sport."""

    id: str
    name: str
    city: str
    state: str
    sport: str
    image_url: str
    matches_played: int | None
    age: int | None
    position: str | None
    bio: str | None
    email: str | None
    phone: str | None
    user_id: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Community:
    """A local community that members can join."""

    id: str
    name: str
    description: str | None
    location: str | None
    image_url: str | None
    member_count: int | None
    created_at: datetime | None
    updated_at: datetime | None
