"""
Content Tree Database Models

Defines the channel hierarchy (channel -> playlist -> bucket), the authored
content tree (bucket root -> itemFolder -> item), item fields and templates.
These tables are written by the authoring dashboards and only read here.
"""

import uuid
from typing import Any

from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tickerfeed.database.models.base import Base, TimestampMixin


def new_id() -> str:
    """Generate a string primary key."""
    return str(uuid.uuid4())


class NodeType:
    """Node type values stored in the ``type`` columns."""

    CHANNEL = "channel"
    PLAYLIST = "playlist"
    BUCKET = "bucket"
    ITEM = "item"
    ITEM_FOLDER = "itemFolder"


class FeedNode(Base, TimestampMixin):
    """
    Node in the channel hierarchy.

    Channels are roots; playlists hang off a channel and buckets hang off a
    playlist. A bucket points at a content tree root through ``content_id``.
    """

    __tablename__ = "channel_playlists"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    parent_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("channel_playlists.id"),
        nullable=True,
        index=True,
    )

    # "channel", "playlist" or "bucket"
    type: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # JSON object, JSON text, or legacy free text ("Hourly")
    schedule: Mapped[Any | None] = mapped_column(JSON, nullable=True)

    # Bucket -> content tree root
    content_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Playlist: explicit carousel type override
    playlist_type: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # Channel: IANA zone name used for schedule evaluation
    timezone: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<FeedNode {self.type} {self.name}>"


class ContentNode(Base, TimestampMixin):
    """
    Node in the authored content tree.

    The root of a tree is referenced by a bucket's ``content_id`` and may carry
    a ``config`` with a ``generateItem`` block. Below it sit items and
    itemFolders, nested arbitrarily deep.
    """

    __tablename__ = "content"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    parent_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("content.id"),
        nullable=True,
        index=True,
    )

    # "bucket", "itemFolder" or "item"
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    schedule: Mapped[Any | None] = mapped_column(JSON, nullable=True)

    template_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("templates.id"),
        nullable=True,
    )
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Bucket root settings, e.g. {"generateItem": {...}}
    config: Mapped[Any | None] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<ContentNode {self.type} {self.name}>"


class ItemField(Base):
    """Name/value field of a content item."""

    __tablename__ = "item_tabfields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    item_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("content.id"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    value: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ItemField {self.name}>"


class Template(Base, TimestampMixin):
    """Named render target on the playout side."""

    __tablename__ = "templates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Template {self.name}>"


class TemplateForm(Base, TimestampMixin):
    """Form schema attached to a template, used to resolve component types."""

    __tablename__ = "template_forms"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    template_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("templates.id"),
        nullable=False,
        unique=True,
    )
    form_schema: Mapped[Any | None] = mapped_column("schema", JSON, nullable=True)
