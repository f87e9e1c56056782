"""Monster trait definitions - templated trait text for the summoning circle."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from campaignforge.database import Base


class TraitSource(str, Enum):
    """Where a trait definition comes from."""
    CORE = "CORE"          # Shipped with the game, read-only
    CAMPAIGN = "CAMPAIGN"  # Authored by a game director


class MonsterTraitDefinition(Base):
    """A monster trait whose effect text may contain template tokens."""

    __tablename__ = "monster_trait_definitions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    effect_text: Mapped[str | None] = mapped_column(Text, nullable=True)

    source: Mapped[str] = mapped_column(String(20), nullable=False, default=TraitSource.CAMPAIGN.value)
    is_read_only: Mapped[bool] = mapped_column(Boolean, default=False)
    is_enabled: Mapped[bool] = mapped_column(Boolean, default=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<MonsterTraitDefinition(id={self.id}, name='{self.name}', source='{self.source}')>"


# Core traits seeded on first run
CORE_TRAITS = [
    {"name": "Tough", "effect_text": "Gain a +1 to defence"},
    {"name": "Dangerous", "effect_text": "Gain a +1 to attack"},
    {"name": "Smart", "effect_text": "Gain a +1 to intellect"},
    {"name": "Resilient", "effect_text": "Gain a +1 to Fortitude"},
    {"name": "Courageous", "effect_text": "Gain a +1 to bravery"},
    {"name": "Reliable", "effect_text": "Gain a +1 to support"},
]
