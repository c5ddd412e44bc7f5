"""SQLAlchemy models for database tables.

Defines categories, subcategories, products, hero slides and admins.
Products reference categories by identifier only; there is no foreign
key, so deleting a category never blocks on or cascades to products.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from catalog_admin.domain.entities import (
    AdminUser,
    Category,
    CategoryRef,
    CategoryStatus,
    HeroSlide,
    Product,
    QuantityOption,
    Subcategory,
)
from catalog_admin.infrastructure.database import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid4())


def _as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; SQLite drops the offset on read."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# ============================================================================
# Category Models
# ============================================================================


class CategoryModel(Base):
    """Category in the catalog taxonomy."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    product_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    # Relationships
    subcategories: Mapped[list["SubcategoryModel"]] = relationship(
        "SubcategoryModel",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="SubcategoryModel.position",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<CategoryModel(id={self.id}, name={self.name})>"

    def to_entity(self) -> Category:
        """Convert to domain entity."""
        return Category(
            id=self.id,
            name=self.name,
            description=self.description,
            subcategories=[sub.to_entity() for sub in self.subcategories],
            product_count=self.product_count,
            status=CategoryStatus(self.status),
        )


class SubcategoryModel(Base):
    """Subcategory row, unique by name within its category."""

    __tablename__ = "subcategories"
    __table_args__ = (
        UniqueConstraint("category_id", "name", name="uq_subcategories_category_name"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    category_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Relationships
    category: Mapped["CategoryModel"] = relationship(
        "CategoryModel", back_populates="subcategories"
    )

    def to_entity(self) -> Subcategory:
        """Convert to domain entity."""
        return Subcategory(id=self.id, name=self.name)


# ============================================================================
# Product Model
# ============================================================================


class ProductModel(Base):
    """Product record.

    Custom quantity options are stored inline as a JSON list of
    ``{amount, unit, price, stock}`` objects, in display order.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    subcategory: Mapped[str | None] = mapped_column(String(200), nullable=True)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    cost_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    unit: Mapped[str] = mapped_column(String(50), nullable=False, default="kg")
    default_quantity: Mapped[str] = mapped_column(String(50), nullable=False, default="1")
    custom_quantity_options: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    display_in_latest: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    display_in_best_selling: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )
    on_sale: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sale_price: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductModel(id={self.id}, name={self.name[:30]})>"

    @classmethod
    def from_entity(cls, product: Product) -> "ProductModel":
        """Create a row from a domain entity."""
        model = cls(id=product.id, created_at=product.created_at, image_url=product.image_url)
        model.apply(product)
        return model

    def apply(self, product: Product) -> None:
        """Copy every editable field from a domain entity."""
        self.name = product.name
        self.description = product.description
        self.category_id = product.category_id
        self.subcategory = product.subcategory
        self.price = product.price
        self.cost_price = product.cost_price
        self.unit = product.unit
        self.default_quantity = product.default_quantity
        self.custom_quantity_options = [o.to_dict() for o in product.custom_quantity_options]
        self.stock = product.stock
        self.display_in_latest = product.display_in_latest
        self.display_in_best_selling = product.display_in_best_selling
        self.on_sale = product.on_sale
        self.sale_price = product.sale_price

    def to_entity(self, category_name: str | None = None) -> Product:
        """Convert to domain entity.

        Args:
            category_name: Joined category name, if the join matched.

        Returns:
            Product entity with ``category`` set when a name was joined.
        """
        return Product(
            id=self.id,
            name=self.name,
            description=self.description,
            category_id=self.category_id,
            subcategory=self.subcategory,
            price=self.price,
            cost_price=self.cost_price,
            unit=self.unit,
            default_quantity=self.default_quantity,
            custom_quantity_options=[
                QuantityOption.from_dict(o) for o in self.custom_quantity_options or []
            ],
            stock=self.stock,
            image_url=self.image_url,
            display_in_latest=self.display_in_latest,
            display_in_best_selling=self.display_in_best_selling,
            on_sale=self.on_sale,
            sale_price=self.sale_price,
            created_at=_as_utc(self.created_at),
            category=(
                CategoryRef(id=self.category_id, name=category_name)
                if category_name is not None
                else None
            ),
        )


# ============================================================================
# Hero Slide Model
# ============================================================================


class HeroSlideModel(Base):
    """Promotional slide."""

    __tablename__ = "hero_slides"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(String(300), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    link: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    order: Mapped[int] = mapped_column("sort_order", Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        onupdate=_utc_now,
    )

    @classmethod
    def from_entity(cls, slide: HeroSlide) -> "HeroSlideModel":
        """Create a row from a domain entity."""
        return cls(
            id=slide.id,
            title=slide.title,
            subtitle=slide.subtitle,
            image_url=slide.image_url,
            link=slide.link,
            active=slide.active,
            order=slide.order,
            created_at=slide.created_at,
            updated_at=slide.updated_at,
        )

    def to_entity(self) -> HeroSlide:
        """Convert to domain entity."""
        return HeroSlide(
            id=self.id,
            title=self.title,
            subtitle=self.subtitle,
            image_url=self.image_url,
            link=self.link,
            active=self.active,
            order=self.order,
            created_at=_as_utc(self.created_at),
            updated_at=_as_utc(self.updated_at),
        )


# ============================================================================
# Admin Model
# ============================================================================


class AdminModel(Base):
    """Administrator account."""

    __tablename__ = "admins"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
    )

    def to_entity(self) -> AdminUser:
        """Convert to domain entity."""
        return AdminUser(id=self.id, email=self.email, password_hash=self.password_hash)
