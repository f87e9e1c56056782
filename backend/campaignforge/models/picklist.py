"""Picklist models - admin-curated rule vocabulary used by the forge."""

from sqlalchemy import Boolean, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from campaignforge.database import Base


class DamageType(Base):
    """A damage type (e.g. Slashing, Fire, Fear) with its attack mode."""

    __tablename__ = "damage_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    attack_mode: Mapped[str] = mapped_column(String(20), nullable=False, default="PHYSICAL")

    def __repr__(self) -> str:
        return f"<DamageType(id={self.id}, name='{self.name}', mode='{self.attack_mode}')>"


class AttackEffect(Base):
    """An effect inflicted by greater successes on attack rolls."""

    __tablename__ = "attack_effects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<AttackEffect(id={self.id}, name='{self.name}')>"


class DefEffect(Base):
    """An effect granted by greater successes on defence rolls."""

    __tablename__ = "def_effects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<DefEffect(id={self.id}, name='{self.name}')>"


class WeaponAttribute(Base):
    """A weapon attribute with its admin-authored descriptor template."""

    __tablename__ = "weapon_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    descriptor_template: Mapped[str | None] = mapped_column(Text, nullable=True)
    descriptor_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Gating / parameter flags
    requires_range: Mapped[str | None] = mapped_column(String(10), nullable=True)
    requires_aoe_shape: Mapped[str | None] = mapped_column(String(10), nullable=True)
    requires_strength_source: Mapped[bool] = mapped_column(Boolean, default=False)
    requires_range_selection: Mapped[bool] = mapped_column(Boolean, default=False)

    def __repr__(self) -> str:
        return f"<WeaponAttribute(id={self.id}, name='{self.name}')>"


class ArmorAttribute(Base):
    """An armor attribute with its admin-authored descriptor template."""

    __tablename__ = "armor_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    descriptor_template: Mapped[str | None] = mapped_column(Text, nullable=True)
    descriptor_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ArmorAttribute(id={self.id}, name='{self.name}')>"


class ShieldAttribute(Base):
    """A shield attribute with its admin-authored descriptor template."""

    __tablename__ = "shield_attributes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    descriptor_template: Mapped[str | None] = mapped_column(Text, nullable=True)
    descriptor_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<ShieldAttribute(id={self.id}, name='{self.name}')>"


class WardingOption(Base):
    """A selectable option for the Warding armor attribute."""

    __tablename__ = "warding_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<WardingOption(id={self.id}, name='{self.name}')>"


class SanctifiedOption(Base):
    """A selectable option for the Sanctified armor attribute."""

    __tablename__ = "sanctified_options"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<SanctifiedOption(id={self.id}, name='{self.name}')>"
