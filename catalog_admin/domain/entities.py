"""Catalog domain entities.

Plain dataclasses shared by the services and both store
implementations. Stores convert their own records to and from these.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


def new_id() -> str:
    """Generate a new record identifier."""
    return str(uuid4())


def utc_now() -> datetime:
    """Current UTC timestamp."""
    return datetime.now(timezone.utc)


# ============================================================================
# Category
# ============================================================================


class CategoryStatus(str, Enum):
    """Category visibility status."""

    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Subcategory:
    """Named subdivision of a category."""

    name: str
    id: str = field(default_factory=new_id)


@dataclass
class Category:
    """Category in the catalog taxonomy.

    Attributes:
        id: Unique category identifier.
        name: Normalized (trimmed, lowercased) name.
        description: Free-text description.
        subcategories: Ordered subcategories, unique by name.
        product_count: Denormalized counter; not maintained by any operation.
        status: Visibility status.
    """

    name: str
    description: str = ""
    subcategories: list[Subcategory] = field(default_factory=list)
    product_count: int = 0
    status: CategoryStatus = CategoryStatus.ACTIVE
    id: str = field(default_factory=new_id)

    def has_subcategory(self, name: str) -> bool:
        """Check whether a subcategory with this normalized name exists."""
        return any(sub.name == name for sub in self.subcategories)

    def find_subcategory(self, subcategory_id: str) -> Subcategory | None:
        """Find a subcategory by identifier."""
        for sub in self.subcategories:
            if sub.id == subcategory_id:
                return sub
        return None


# ============================================================================
# Product
# ============================================================================


@dataclass
class QuantityOption:
    """Purchasable pack size of a product.

    Each option carries its own price and stock, independent of the
    product's base price and stock.
    """

    amount: str
    unit: str
    price: float
    stock: int = 0

    def to_dict(self) -> dict:
        """Convert to the stored dictionary form."""
        return {
            "amount": self.amount,
            "unit": self.unit,
            "price": self.price,
            "stock": self.stock,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "QuantityOption":
        """Create from the stored dictionary form."""
        return cls(
            amount=data["amount"],
            unit=data["unit"],
            price=data["price"],
            stock=data.get("stock", 0),
        )


@dataclass(frozen=True)
class CategoryRef:
    """Category name attached to a product at read time."""

    id: str
    name: str


@dataclass
class Product:
    """Product record.

    Attributes:
        id: Unique product identifier.
        name: Display name.
        category_id: Identifier of the referenced category.
        price: Base price.
        unit: Display unit (e.g., "kg").
        stock: Units in stock.
        description: Display description.
        subcategory: Normalized subcategory name.
        cost_price: Purchase cost.
        default_quantity: Quantity shown on listing cards.
        custom_quantity_options: Pack-size variants.
        image_url: Hosted image URL.
        display_in_latest: Whether the product appears in "latest".
        display_in_best_selling: Whether the product appears in "best selling".
        on_sale: Whether the sale price applies.
        sale_price: Sale price, meaningful only when on_sale.
        created_at: Creation timestamp.
        category: Joined category, populated on reads only.
    """

    name: str
    category_id: str
    price: float
    unit: str = "kg"
    stock: int = 0
    description: str | None = None
    subcategory: str | None = None
    cost_price: float = 0
    default_quantity: str = "1"
    custom_quantity_options: list[QuantityOption] = field(default_factory=list)
    image_url: str | None = None
    display_in_latest: bool = False
    display_in_best_selling: bool = False
    on_sale: bool = False
    sale_price: float = 0
    created_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)
    category: CategoryRef | None = None


# Fields replaced wholesale on every product update.
PRODUCT_EDITABLE_FIELDS = (
    "name",
    "description",
    "category_id",
    "subcategory",
    "price",
    "cost_price",
    "unit",
    "default_quantity",
    "custom_quantity_options",
    "stock",
    "display_in_latest",
    "display_in_best_selling",
    "on_sale",
    "sale_price",
)


# ============================================================================
# Hero Slide
# ============================================================================


@dataclass
class HeroSlide:
    """Promotional slide shown on the storefront home page."""

    title: str
    image_url: str
    subtitle: str | None = None
    link: str | None = None
    active: bool = True
    order: int = 0
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    id: str = field(default_factory=new_id)


# ============================================================================
# Admin
# ============================================================================


@dataclass
class AdminUser:
    """Administrator account."""

    email: str
    password_hash: str
    id: str = field(default_factory=new_id)
