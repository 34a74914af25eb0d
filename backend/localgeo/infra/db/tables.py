from __future__ import annotations

from sqlalchemy import Boolean, Column, DateTime, Float, Index, MetaData, Table, Text

metadata = MetaData()

pins_table = Table(
    "pins",
    metadata,
    Column("id", Text, primary_key=True),
    Column("owner_id", Text, nullable=False),
    Column("content", Text, nullable=False),
    Column("lat", Float, nullable=False),
    Column("lon", Float, nullable=False),
    Column("geo_tag", Text, nullable=False),
    Column("category", Text, nullable=False),
    Column("shared", Boolean, nullable=False, default=False),
    Column("type", Text),
    Column("city", Text),
    Column("place_id", Text),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True)),
)

Index("ix_pins_owner_id", pins_table.c.owner_id)
Index("ix_pins_geo_tag", pins_table.c.geo_tag)
