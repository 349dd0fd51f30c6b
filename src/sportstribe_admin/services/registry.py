"""Field-mapping descriptors for every admin-managed entity kind."""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Generic, TypeVar

from sportstribe_admin.domain.entities import (
    Community,
    CommunityHighlight,
    LiveMatch,
    NewsArticle,
    Player,
    Product,
    Registration,
    Sport,
    Tournament,
)

logger = logging.getLogger(__name__)

Codec = Callable[[object], object]
EntityT = TypeVar("EntityT")

SERVER_FIELDS = ("id", "created_at", "updated_at")


class FieldError(ValueError):
    """A domain value cannot be written to the store."""

    def __init__(self, field_name: str, reason: str):
        super().__init__(f"{field_name}: {reason}")
        self.field_name = field_name
        self.reason = reason


def _decode_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    if "T" in text:
        return datetime.fromisoformat(text).date()
    return date.fromisoformat(text)


def _encode_date(value: object) -> str:
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return date.fromisoformat(str(value)).isoformat()


def _decode_datetime(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _encode_datetime(value: object) -> str:
    if isinstance(value, datetime):
        return value.isoformat()
    return datetime.fromisoformat(str(value)).isoformat()


def _to_int(value: object) -> int:
    if isinstance(value, bool):
        raise TypeError("expected an integer")
    if isinstance(value, float) and not value.is_integer():
        raise ValueError("expected a whole number")
    return int(value)  # type: ignore[call-overload]


@dataclass(frozen=True)
class FieldMapping:
    """Pairs a wire column with a domain attribute."""

    wire: str
    domain: str
    decode: Codec | None = None
    encode: Codec | None = None
    required: bool = False
    choices: frozenset[str] | None = None

    def to_domain(self, value: object) -> object:
        """Convert a wire value to its domain form."""
        if value is None or self.decode is None:
            return value
        if value == "":
            return None
        return self.decode(value)

    def to_wire(self, value: object) -> object:
        """Convert a domain value to its wire form, enforcing constraints."""
        if value is None:
            if self.required:
                raise FieldError(self.domain, "is required")
            return None
        if self.choices is not None and (
            not isinstance(value, str) or value not in self.choices
        ):
            allowed = ", ".join(sorted(self.choices))
            raise FieldError(self.domain, f"must be one of {allowed}")
        if self.encode is None:
            return value
        try:
            return self.encode(value)
        except (TypeError, ValueError) as exc:
            raise FieldError(self.domain, "has an invalid format") from exc


def _field(  # noqa: PLR0913
    wire: str,
    domain: str | None = None,
    *,
    decode: Codec | None = None,
    encode: Codec | None = None,
    required: bool = False,
    choices: tuple[str, ...] | None = None,
) -> FieldMapping:
    return FieldMapping(
        wire=wire,
        domain=domain or wire,
        decode=decode,
        encode=encode,
        required=required,
        choices=frozenset(choices) if choices is not None else None,
    )


def _date_field(wire: str, domain: str, *, required: bool = False) -> FieldMapping:
    return _field(
        wire, domain, decode=_decode_date, encode=_encode_date, required=required
    )


def _int_field(wire: str) -> FieldMapping:
    return _field(wire, decode=_to_int, encode=_to_int)


@dataclass(frozen=True)
class EntityDescriptor(Generic[EntityT]):
    """Describes how one entity kind is stored and translated."""

    name: str
    label: str
    title: str
    table: str
    model: type[EntityT]
    fields: tuple[FieldMapping, ...]
    order_by: str = "created_at"
    descending: bool = True

    @property
    def url_name(self) -> str:
        """Return the name used in HTTP paths."""
        return self.name.replace("_", "-")

    def field(self, domain_name: str) -> FieldMapping | None:
        """Return the mapping for a domain attribute, if declared."""
        for mapping in self.fields:
            if mapping.domain == domain_name:
                return mapping
        return None

    def column(self, domain_name: str) -> str:
        """Return the wire column for a domain or server-owned field."""
        if domain_name in SERVER_FIELDS:
            return domain_name
        mapping = self.field(domain_name)
        if mapping is None:
            raise FieldError(domain_name, f"is not a field of {self.label}")
        return mapping.wire

    def to_domain(self, row: Mapping[str, object]) -> EntityT:
        """Build the domain model from a wire row, ignoring unmapped columns."""
        values = {
            mapping.domain: mapping.to_domain(row.get(mapping.wire))
            for mapping in self.fields
        }
        return self.model(
            id=str(row["id"]),
            created_at=_timestamp(row.get("created_at")),
            updated_at=_timestamp(row.get("updated_at")),
            **values,
        )

    def to_wire(
        self, values: Mapping[str, object], *, partial: bool
    ) -> dict[str, object]:
        """Translate domain values to a wire payload restricted to mapped fields."""
        payload: dict[str, object] = {}
        for mapping in self.fields:
            if mapping.domain in values:
                payload[mapping.wire] = mapping.to_wire(values[mapping.domain])
            elif mapping.required and not partial:
                raise FieldError(mapping.domain, "is required")
        dropped = sorted(set(values) - {mapping.domain for mapping in self.fields})
        if dropped:
            logger.debug("Dropping unmapped %s fields: %s", self.label, dropped)
        return payload


def _timestamp(value: object) -> datetime | None:
    if value is None or value == "":
        return None
    return _decode_datetime(value)


NEWS: EntityDescriptor[NewsArticle] = EntityDescriptor(
    name="news",
    label="news article",
    title="News",
    table="news",
    model=NewsArticle,
    fields=(
        _field("title", required=True),
        _field("description", required=True),
        _date_field("date", "published_on", required=True),
        _field("image", "image_url", required=True),
        _field("content"),
    ),
    order_by="published_on",
)

SPORTS: EntityDescriptor[Sport] = EntityDescriptor(
    name="sports",
    label="sport",
    title="Sports",
    table="sports",
    model=Sport,
    fields=(
        _field("name", required=True),
        _field("image", "image_url", required=True),
    ),
)

LIVE_MATCHES: EntityDescriptor[LiveMatch] = EntityDescriptor(
    name="live_matches",
    label="live match",
    title="Live matches",
    table="live_matches",
    model=LiveMatch,
    fields=(
        _field("title", required=True),
        _field("status", required=True, choices=("LIVE", "Upcoming", "Completed")),
        _field("image", "image_url", required=True),
        _field("stream_url"),
    ),
)

PRODUCTS: EntityDescriptor[Product] = EntityDescriptor(
    name="products",
    label="product",
    title="Products",
    table="products",
    model=Product,
    fields=(
        _field("name", required=True),
        _field("price", required=True),
        _field("image", "image_url", required=True),
        _field("description"),
        _int_field("stock"),
    ),
)

COMMUNITY_HIGHLIGHTS: EntityDescriptor[CommunityHighlight] = EntityDescriptor(
    name="community_highlights",
    label="community highlight",
    title="Community highlights",
    table="community_highlights",
    model=CommunityHighlight,
    fields=(
        _field("title", required=True),
        _field("media_url", required=True),
        _field("media_type", required=True, choices=("image", "video")),
        _field("description"),
        _date_field("date", "happened_on"),
    ),
)

REGISTRATIONS: EntityDescriptor[Registration] = EntityDescriptor(
    name="registrations",
    label="registration",
    title="Registrations",
    table="tournament_registrations",
    model=Registration,
    fields=(
        _field("tournament_id", required=True),
        _field("tournament_name", required=True),
        _field("user_id", required=True),
        _field("user_name", required=True),
        _field("user_email"),
        _field(
            "registration_date",
            "registered_at",
            decode=_decode_datetime,
            encode=_encode_datetime,
        ),
        _field("status", required=True, choices=("pending", "confirmed", "rejected")),
    ),
)

TOURNAMENTS: EntityDescriptor[Tournament] = EntityDescriptor(
    name="tournaments",
    label="tournament",
    title="Tournaments",
    table="tournaments",
    model=Tournament,
    fields=(
        _field("name", required=True),
        _date_field("date", "starts_on", required=True),
        _field("time"),
        _field("location", required=True),
        _field("venue"),
        _field("image", "image_url", required=True),
        _field("status", required=True, choices=("active", "upcoming", "completed")),
        _field("description"),
        _field("rules"),
        _field("prize_pool"),
        _int_field("max_participants"),
        _field("registration_deadline"),
        _field("contact_info"),
        _field("registration_fee"),
    ),
    order_by="starts_on",
    descending=False,
)

PLAYERS: EntityDescriptor[Player] = EntityDescriptor(
    name="players",
    label="player",
    title="Players",
    table="players",
    model=Player,
    fields=(
        _field("name", required=True),
        _field("city", required=True),
        _field("state", required=True),
        _field("sport", required=True),
        _field("image", "image_url", required=True),
        _int_field("matches_played"),
        _int_field("age"),
        _field("position"),
        _field("bio"),
        _field("email"),
        _field("phone"),
        _field("user_id"),
    ),
)

COMMUNITIES: EntityDescriptor[Community] = EntityDescriptor(
    name="communities",
    label="community",
    title="Communities",
    table="communities",
    model=Community,
    fields=(
        _field("name", required=True),
        _field("description"),
        _field("location"),
        _field("image_url"),
        _int_field("member_count"),
    ),
    descending=False,
)

ENTITY_REGISTRY: dict[str, EntityDescriptor[Any]] = {
    descriptor.name: descriptor
    for descriptor in (
        NEWS,
        SPORTS,
        LIVE_MATCHES,
        PRODUCTS,
        COMMUNITY_HIGHLIGHTS,
        REGISTRATIONS,
        TOURNAMENTS,
        PLAYERS,
        COMMUNITIES,
    )
}
