"""Forge pricing tables - multipliers and per-feature costs."""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from campaignforge.database import Base


class ForgeConfigEntry(Base):
    """A multiplier row, e.g. (RARITY, rare) or (SIZE, Weapon, Two Handed)."""

    __tablename__ = "forge_config_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    selector1: Mapped[str] = mapped_column(String(100), nullable=False)
    selector2: Mapped[str | None] = mapped_column(String(100), nullable=True)
    value: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ForgeConfigEntry(category='{self.category}', selector1='{self.selector1}', "
            f"selector2='{self.selector2}', value={self.value})>"
        )


class ForgeCostEntry(Base):
    """A sparse cost row keyed by category and up to three selectors."""

    __tablename__ = "forge_cost_entries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    category: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    selector1: Mapped[str | None] = mapped_column(String(100), nullable=True)
    selector2: Mapped[str | None] = mapped_column(String(100), nullable=True)
    selector3: Mapped[str | None] = mapped_column(String(100), nullable=True)
    value: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ForgeCostEntry(category='{self.category}', selector1='{self.selector1}', "
            f"selector2='{self.selector2}', selector3='{self.selector3}', value={self.value})>"
        )
