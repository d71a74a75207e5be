"""
Plan DataExtension tables: a generic plugin-value store.

Third-party plugins (Vault, Essentials Economy, PlaceholderAPI, ...) publish
arbitrary per-player values through Plan. There is no fixed column per
metric; a value row points at a provider (the metric) which points at a
plugin:

    plan_extension_user_values.provider_id -> plan_extension_providers.id
    plan_extension_providers.plugin_id     -> plan_extension_plugins.id

A value row holds at most one populated encoding (double, long, string, ...).
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import BigInteger, Boolean, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.core.database.base import PrimaryBase


class PlanExtensionPlugin(PrimaryBase):
    __tablename__ = "plan_extension_plugins"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    last_updated: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)


class PlanExtensionProvider(PrimaryBase):
    """A metric published by a plugin; ``text`` is its display label."""

    __tablename__ = "plan_extension_providers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    name: Mapped[str] = mapped_column(String(50), nullable=False)

    text: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    plugin_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("plan_extension_plugins.id"),
        nullable=False,
    )


class PlanExtensionUserValue(PrimaryBase):
    __tablename__ = "plan_extension_user_values"
    __table_args__ = (
        Index("ix_plan_extension_user_values_uuid", "uuid"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    provider_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("plan_extension_providers.id"),
        nullable=False,
    )

    uuid: Mapped[str] = mapped_column(String(36), nullable=False)

    boolean_value: Mapped[Optional[bool]] = mapped_column(Boolean, nullable=True)

    double_value: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    long_value: Mapped[Optional[int]] = mapped_column(BigInteger, nullable=True)

    string_value: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
