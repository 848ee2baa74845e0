"""World object models (rooms, things, exits, players)."""

from sqlalchemy import ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from mudmatch.database.models.base import Base, TimestampMixin


class WorldObject(Base, TimestampMixin):
    """One entity of the containment graph.

    References to other objects are plain ids, like dbrefs: they may
    point at objects that no longer exist.
    """

    __tablename__ = "world_objects"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=False)

    # Identity
    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        comment="Name; exits carry ';'-separated aliases (e.g., 'North;n')",
    )
    type_mask: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="EntityType bitmask",
    )

    # Graph references
    location_id: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        index=True,
        comment="Container; for exits the source room",
    )
    destination_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    zone_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parent_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    owner_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
        comment="Order within the location's contents or exits",
    )

    aliases: Mapped[list | None] = mapped_column(JSON, nullable=True)
    flags: Mapped[list | None] = mapped_column(JSON, nullable=True)
    created_stamp: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
        comment="Creation stamp matched by '#id:stamp' identifiers",
    )

    attributes: Mapped[list["ObjectAttribute"]] = relationship(
        back_populates="owner_object",
        cascade="all, delete-orphan",
        order_by="ObjectAttribute.id",
    )

    def __repr__(self) -> str:
        return f"<WorldObject #{self.id} {self.name!r}>"


class ObjectAttribute(Base):
    """A named attribute on a world object (LOCK, GENERIC`#12, ...)."""

    __tablename__ = "object_attributes"
    __table_args__ = (UniqueConstraint("object_id", "name", name="uq_object_attribute"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    object_id: Mapped[int] = mapped_column(
        ForeignKey("world_objects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")

    owner_object: Mapped[WorldObject] = relationship(back_populates="attributes")

    def __repr__(self) -> str:
        return f"<ObjectAttribute #{self.object_id}/{self.name}>"
