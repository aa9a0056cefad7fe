"""FastAPI routes for the storefront: cart, orders and product admin."""

import json
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from protean.utils.globals import current_domain
from pydantic.alias_generators import to_snake

from storefront.api.identity import Caller, current_caller, require_admin
from storefront.api.schemas import (
    AddTrackingNumberRequest,
    AddToCartRequest,
    ChangeProductStatusRequest,
    CreateProductRequest,
    OfferingPatch,
    PlaceOrderRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
    UpdatePaymentStatusRequest,
)
from storefront.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from storefront.cart.management import OpenCart
from storefront.cart.reconciliation import SyncCart, has_changes
from storefront.cart.view import cart_count, load_cart_view
from storefront.catalogue.management import ChangeProductStatus, CreateProduct, TrashProduct, UpdateOffering
from storefront.catalogue.product import Product
from storefront.catalogue.reader import CatalogReader
from storefront.order.cancellation import CancelOrder
from storefront.order.lifecycle import AddTrackingNumber, DeleteOrder, UpdateOrderStatus, UpdatePaymentStatus
from storefront.order.order import Order
from storefront.order.placement import PlaceOrder


def respond(message: str, data=None, status_code: int = 200, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message, "data": data, **extra})


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(caller: Caller = Depends(current_caller)):
    current_domain.process(OpenCart(customer_id=caller.user_id), asynchronous=False)
    return respond("Cart fetched successfully", load_cart_view(caller.user_id))


@cart_router.post("")
async def add_to_cart(body: AddToCartRequest, caller: Caller = Depends(current_caller)):
    command = AddToCart(
        customer_id=caller.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return respond("Item added to cart successfully", load_cart_view(caller.user_id))


@cart_router.delete("")
async def clear_cart(caller: Caller = Depends(current_caller)):
    current_domain.process(ClearCart(customer_id=caller.user_id), asynchronous=False)
    return respond("Cart cleared successfully", load_cart_view(caller.user_id))


@cart_router.post("/sync")
async def sync_cart(caller: Caller = Depends(current_caller)):
    ledger = current_domain.process(SyncCart(customer_id=caller.user_id), asynchronous=False)
    message = "Cart synchronized with latest product data" if has_changes(ledger) else "Cart is up to date"
    return respond(message, {"cart": load_cart_view(caller.user_id), "changes": ledger})


@cart_router.get("/count")
async def get_cart_count(caller: Caller = Depends(current_caller)):
    return respond("Cart count fetched successfully", {"count": cart_count(caller.user_id)})


@cart_router.put("/{item_id}")
async def update_cart_item(item_id: str, body: UpdateCartItemRequest, caller: Caller = Depends(current_caller)):
    command = UpdateCartItem(
        customer_id=caller.user_id,
        item_id=item_id,
        quantity=body.quantity,
    )
    current_domain.process(command, asynchronous=False)
    return respond("Cart item updated successfully", load_cart_view(caller.user_id))


@cart_router.delete("/{item_id}")
async def remove_cart_item(item_id: str, caller: Caller = Depends(current_caller)):
    current_domain.process(RemoveFromCart(customer_id=caller.user_id, item_id=item_id), asynchronous=False)
    return respond("Item removed from cart successfully", load_cart_view(caller.user_id))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order_detail(order_id) -> dict:
    return current_domain.repository_for(Order).get_live(order_id).to_detail()


def _page_response(message: str, page) -> JSONResponse:
    return respond(
        message,
        [order.to_summary() for order in page.orders],
        pagination=page.pagination(),
    )


@order_router.post("", status_code=201)
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(current_caller)):
    command = PlaceOrder(
        customer_id=caller.user_id,
        customer_email=caller.email,
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        billing_address=json.dumps(body.billing_address.model_dump()) if body.billing_address else None,
        payment_method=body.payment_method.value,
        notes=body.notes,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return respond("Order created successfully", _order_detail(order_id), status_code=201)


@order_router.get("")
async def list_orders(
    page: int = 1,
    limit: int = 10,
    sort: str = "created_at",
    order: str = "desc",
    status: str | None = None,
    payment_status: str | None = Query(default=None, alias="paymentStatus"),
    payment_method: str | None = Query(default=None, alias="paymentMethod"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    search: str | None = None,
    caller: Caller = Depends(require_admin),
):
    result = current_domain.repository_for(Order).list_orders(
        page=page,
        limit=limit,
        status=status,
        payment_status=payment_status,
        payment_method=payment_method,
        start_date=start_date,
        end_date=end_date,
        search=search,
        sort=to_snake(sort),
        order=order,
    )
    return _page_response("Orders fetched successfully", result)


@order_router.get("/my-orders")
async def my_orders(
    page: int = 1,
    limit: int = 10,
    sort: str = "created_at",
    order: str = "desc",
    status: str | None = None,
    caller: Caller = Depends(current_caller),
):
    result = current_domain.repository_for(Order).list_for_customer(
        caller.user_id,
        page=page,
        limit=limit,
        status=status,
        sort=to_snake(sort),
        order=order,
    )
    return _page_response("Orders fetched successfully", result)


@order_router.get("/stats")
async def order_stats(period: str = "month", caller: Caller = Depends(require_admin)):
    return respond("Order statistics fetched successfully", current_domain.repository_for(Order).stats(period))


@order_router.get("/{order_id}")
async def get_order(order_id: str, caller: Caller = Depends(current_caller)):
    order = current_domain.repository_for(Order).get_visible_to(order_id, caller.user_id, is_admin=caller.is_admin)
    return respond("Order fetched successfully", order.to_detail())


@order_router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str, body: UpdateOrderStatusRequest, caller: Caller = Depends(require_admin)
):
    command = UpdateOrderStatus(order_id=order_id, order_status=body.order_status.value)
    current_domain.process(command, asynchronous=False)
    return respond("Order status updated successfully", _order_detail(order_id))


@order_router.patch("/{order_id}/payment")
async def update_payment_status(
    order_id: str, body: UpdatePaymentStatusRequest, caller: Caller = Depends(require_admin)
):
    command = UpdatePaymentStatus(order_id=order_id, payment_status=body.payment_status.value)
    current_domain.process(command, asynchronous=False)
    return respond("Payment status updated successfully", _order_detail(order_id))


@order_router.patch("/{order_id}/tracking")
async def add_tracking_number(
    order_id: str, body: AddTrackingNumberRequest, caller: Caller = Depends(require_admin)
):
    command = AddTrackingNumber(order_id=order_id, tracking_number=body.tracking_number)
    current_domain.process(command, asynchronous=False)
    return respond("Tracking number added successfully", _order_detail(order_id))


@order_router.patch("/{order_id}/cancel")
async def cancel_order(order_id: str, caller: Caller = Depends(current_caller)):
    command = CancelOrder(order_id=order_id, actor_id=caller.user_id, actor_role=caller.role.value)
    current_domain.process(command, asynchronous=False)
    return respond("Order cancelled successfully", _order_detail(order_id))


@order_router.delete("/{order_id}")
async def delete_order(order_id: str, caller: Caller = Depends(require_admin)):
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return respond("Order deleted successfully")


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


def _availability(product_id) -> dict:
    entry = CatalogReader(current_domain.repository_for(Product)).lookup(product_id)
    return {
        "productId": entry.product_id,
        "name": entry.name,
        "productType": entry.product_type,
        "status": entry.status,
        "available": entry.available,
        "purchasable": entry.purchasable,
        "addable": entry.addable,
        "unitPrice": entry.unit_price,
        "stock": entry.stock,
        "image": entry.image,
        "reason": entry.reason,
    }


@product_router.post("", status_code=201)
async def create_product(body: CreateProductRequest, caller: Caller = Depends(require_admin)):
    command = CreateProduct(
        name=body.name,
        product_type=body.product_type.value,
        offerings=json.dumps([offering.model_dump(exclude_none=True) for offering in body.offerings]),
        status=body.status.value if body.status else None,
    )
    product_id = current_domain.process(command, asynchronous=False)
    return respond("Product created successfully", _availability(product_id), status_code=201)


@product_router.get("/{product_id}/availability")
async def product_availability(product_id: str):
    return respond("Product availability fetched successfully", _availability(product_id))


@product_router.patch("/{product_id}/status")
async def change_product_status(
    product_id: str, body: ChangeProductStatusRequest, caller: Caller = Depends(require_admin)
):
    command = ChangeProductStatus(product_id=product_id, status=body.status.value)
    current_domain.process(command, asynchronous=False)
    return respond("Product status updated successfully", _availability(product_id))


@product_router.patch("/{product_id}/offering")
async def update_offering(product_id: str, body: OfferingPatch, caller: Caller = Depends(require_admin)):
    command = UpdateOffering(product_id=product_id, changes=json.dumps(body.changes()))
    current_domain.process(command, asynchronous=False)
    return respond("Product offering updated successfully", _availability(product_id))


@product_router.delete("/{product_id}")
async def trash_product(product_id: str, caller: Caller = Depends(require_admin)):
    current_domain.process(TrashProduct(product_id=product_id), asynchronous=False)
    return respond("Product deleted successfully")
