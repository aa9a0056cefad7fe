"""Product aggregate with its type-specific offering payloads.

A product carries exactly one kind of payload, picked by ``product_type``:

    SIMPLE    -> product_simple     (one row)
    VARIABLE  -> product_variable   (one row per variation)
    GROUP     -> product_group      (one row per grouped item)
    EXTERNAL  -> product_external   (one row, sold elsewhere through ``link``)

Every row holds its own ``regular_price``, optional ``sale_price`` and
optional ``stock`` (``None`` means stock is not tracked).

Stock moves only through ``decrement_stock`` and ``restore_stock``. Both act
on the primary offering: the single SIMPLE row, or the *first* variation of a
VARIABLE product. Carts and orders do not record which variation was picked,
so the first variation stands in for all of them.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Integer, String, Text

from storefront.catalogue.events import (
    OfferingUpdated,
    ProductCreated,
    ProductStatusChanged,
    ProductStockChanged,
    ProductTrashed,
)
from storefront.domain import storefront
from storefront.shared.choices import coerce_choice
from storefront.shared.errors import InsufficientStock
from storefront.shared.lifecycle import RecordState, assert_live


class ProductType(Enum):
    SIMPLE = "SIMPLE"
    VARIABLE = "VARIABLE"
    GROUP = "GROUP"
    EXTERNAL = "EXTERNAL"


class ProductStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    DRAFT = "DRAFT"
    OUT_OF_STOCK = "OUT_OF_STOCK"


# Product types whose stock the storefront manages and sells through checkout
PURCHASABLE_TYPES = {ProductType.SIMPLE, ProductType.VARIABLE}

# Group items can sit in a cart; sync and checkout still reject them
CART_TYPES = {*PURCHASABLE_TYPES, ProductType.GROUP}

# Fields an admin may patch on the primary offering
OFFERING_PATCH_FIELDS = ("regular_price", "sale_price", "stock")

_PAYLOAD_FIELDS = {
    ProductType.SIMPLE: "product_simple",
    ProductType.VARIABLE: "product_variable",
    ProductType.GROUP: "product_group",
    ProductType.EXTERNAL: "product_external",
}

_SINGLE_ROW_TYPES = {ProductType.SIMPLE, ProductType.EXTERNAL}

_COMMON_KEYS = ("regular_price", "sale_price", "stock")
_PAYLOAD_KEYS = {
    ProductType.SIMPLE: _COMMON_KEYS,
    ProductType.VARIABLE: ("name", *_COMMON_KEYS),
    ProductType.GROUP: ("name", *_COMMON_KEYS),
    ProductType.EXTERNAL: ("link", *_COMMON_KEYS),
}


def _photos_json(photos):
    if photos is None:
        return json.dumps([])
    return photos if isinstance(photos, str) else json.dumps(list(photos))


# ---------------------------------------------------------------------------
# Offering entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Product")
class SimpleOffering:
    regular_price = Float(required=True, min_value=0.01)
    sale_price = Float(min_value=0.0)
    stock = Integer(min_value=0)
    photos = Text()  # JSON array of image URLs
    position = Integer(default=0)


@storefront.entity(part_of="Product")
class Variation:
    name = String(required=True, max_length=255)
    regular_price = Float(required=True, min_value=0.01)
    sale_price = Float(min_value=0.0)
    stock = Integer(min_value=0)
    photos = Text()
    position = Integer(default=0)


@storefront.entity(part_of="Product")
class GroupItem:
    name = String(required=True, max_length=255)
    regular_price = Float(required=True, min_value=0.01)
    sale_price = Float(min_value=0.0)
    stock = Integer(min_value=0)
    photos = Text()
    position = Integer(default=0)


@storefront.entity(part_of="Product")
class ExternalOffering:
    link = String(required=True, max_length=1000)
    regular_price = Float(required=True, min_value=0.01)
    sale_price = Float(min_value=0.0)
    stock = Integer(min_value=0)
    photos = Text()
    position = Integer(default=0)


_PAYLOAD_CLASSES = {
    ProductType.SIMPLE: SimpleOffering,
    ProductType.VARIABLE: Variation,
    ProductType.GROUP: GroupItem,
    ProductType.EXTERNAL: ExternalOffering,
}


def effective_price(offering) -> float:
    """Sale price wins over the regular price when one is set."""
    return offering.sale_price if offering.sale_price is not None else offering.regular_price


def first_photo(offering) -> str | None:
    photos = json.loads(offering.photos) if offering.photos else []
    return photos[0] if photos else None


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    product_type = String(required=True, choices=ProductType)
    status = String(choices=ProductStatus, default=ProductStatus.ACTIVE.value)
    record_state = String(choices=RecordState, default=RecordState.ACTIVE.value)
    product_simple = HasMany(SimpleOffering)
    product_variable = HasMany(Variation)
    product_group = HasMany(GroupItem)
    product_external = HasMany(ExternalOffering)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def only_the_matching_payload_is_populated(self):
        own_field = _PAYLOAD_FIELDS[ProductType(self.product_type)]
        for field_name in _PAYLOAD_FIELDS.values():
            if field_name != own_field and getattr(self, field_name):
                raise ValidationError(
                    {field_name: [f"{self.product_type} products cannot carry {field_name} data"]}
                )

    @invariant.post
    def single_row_payloads_hold_one_row(self):
        product_type = ProductType(self.product_type)
        if product_type in _SINGLE_ROW_TYPES and len(self.payload) > 1:
            raise ValidationError({_PAYLOAD_FIELDS[product_type]: ["Only one offering is allowed"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, name, product_type, offerings, status=None):
        """Create a product together with its offering rows.

        Args:
            name: Display name.
            product_type: One of ProductType values.
            offerings: List of dicts with the payload fields for the type
                (``regular_price``, ``sale_price``, ``stock``, ``photos`` and,
                depending on the type, ``name`` or ``link``).
            status: Optional ProductStatus value (defaults to ACTIVE).
        """
        product_type = coerce_choice(ProductType, product_type, "product_type")
        if not offerings:
            raise ValidationError({_PAYLOAD_FIELDS[product_type]: ["At least one offering is required"]})
        payload_cls = _PAYLOAD_CLASSES[product_type]
        keys = _PAYLOAD_KEYS[product_type]
        rows = [
            payload_cls(
                **{k: v for k, v in row.items() if k in keys},
                photos=_photos_json(row.get("photos")),
                position=position,
            )
            for position, row in enumerate(offerings)
        ]

        now = datetime.now(UTC)
        product = cls(
            name=name,
            product_type=product_type.value,
            status=coerce_choice(ProductStatus, status, "status").value if status else ProductStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
            **{_PAYLOAD_FIELDS[product_type]: rows},
        )
        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=name,
                product_type=product_type.value,
                status=product.status,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Offering access
    # -------------------------------------------------------------------
    @property
    def payload(self):
        rows = getattr(self, _PAYLOAD_FIELDS[ProductType(self.product_type)]) or []
        return sorted(rows, key=lambda row: row.position or 0)

    @property
    def primary_offering(self):
        """The row that prices and stocks the product, or None when empty."""
        rows = self.payload
        return rows[0] if rows else None

    @property
    def is_purchasable_type(self) -> bool:
        return ProductType(self.product_type) in PURCHASABLE_TYPES

    @property
    def accepts_cart_lines(self) -> bool:
        return ProductType(self.product_type) in CART_TYPES

    # -------------------------------------------------------------------
    # Admin operations
    # -------------------------------------------------------------------
    def change_status(self, new_status):
        assert_live(self, "Product")
        new_status = coerce_choice(ProductStatus, new_status, "status")
        previous_status = self.status
        self.status = new_status.value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStatusChanged(
                product_id=str(self.id),
                previous_status=previous_status,
                new_status=new_status.value,
            )
        )

    def update_offering(self, changes):
        """Apply a patch to the primary offering.

        Only keys in OFFERING_PATCH_FIELDS are accepted; an explicit ``None``
        clears ``sale_price`` or stops tracking ``stock``.
        """
        assert_live(self, "Product")
        unknown = sorted(set(changes) - set(OFFERING_PATCH_FIELDS))
        if unknown:
            raise ValidationError({"changes": [f"Unsupported offering fields: {', '.join(unknown)}"]})
        if not changes:
            raise ValidationError({"changes": ["Nothing to update"]})
        if "regular_price" in changes and changes["regular_price"] is None:
            raise ValidationError({"regular_price": ["Regular price cannot be removed"]})

        offering = self.primary_offering
        if offering is None:
            raise ValidationError({"offering": ["Product has no offering to update"]})

        for field_name, value in changes.items():
            setattr(offering, field_name, value)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OfferingUpdated(
                product_id=str(self.id),
                changes=json.dumps(changes),
            )
        )

    def trash(self):
        assert_live(self, "Product")
        now = datetime.now(UTC)
        self.record_state = RecordState.TRASHED.value
        self.updated_at = now

        self.raise_(ProductTrashed(product_id=str(self.id), trashed_at=now))

    # -------------------------------------------------------------------
    # Stock movements
    # -------------------------------------------------------------------
    def _stocked_offering(self):
        if not self.is_purchasable_type:
            raise ValidationError({"product_type": [f"Stock of {self.product_type} products is not managed here"]})
        return self.primary_offering

    def decrement_stock(self, quantity):
        """Take ``quantity`` units out of tracked stock.

        Untracked stock is left untouched. Raises InsufficientStock instead of
        letting stock go negative.
        """
        offering = self._stocked_offering()
        if offering is None or offering.stock is None:
            return

        if offering.stock < quantity:
            raise InsufficientStock(product_id=str(self.id), available=offering.stock, requested=quantity)

        previous_stock = offering.stock
        offering.stock = previous_stock - quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStockChanged(
                product_id=str(self.id),
                previous_stock=previous_stock,
                new_stock=offering.stock,
                reason="Order placed",
            )
        )

    def restore_stock(self, quantity):
        """Put ``quantity`` units back into tracked stock."""
        offering = self._stocked_offering()
        if offering is None or offering.stock is None:
            return

        previous_stock = offering.stock
        offering.stock = previous_stock + quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductStockChanged(
                product_id=str(self.id),
                previous_stock=previous_stock,
                new_stock=offering.stock,
                reason="Order cancelled",
            )
        )
