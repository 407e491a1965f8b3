from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List, Optional
import logging
import sys
from pathlib import Path

# Add src to path for internal imports
src_path = Path(__file__).parent.parent.parent
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from coffee_pos import __version__
from coffee_pos.api import state
from coffee_pos.config.settings import setup_logging
from coffee_pos.engine import NotFoundError, OperationResult, Order, PosError

setup_logging(state.settings)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Coffee POS API",
    description="Order composition and pricing for the coffee shop register",
    version=__version__
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class OpenOrderRequest(BaseModel):
    customer_phone: Optional[str] = None


class AddItemRequest(BaseModel):
    product_id: str
    quantity: int = 1
    options: List[str] = Field(default_factory=list)


class QuantityUpdate(BaseModel):
    quantity: int


class CustomizationUpdate(BaseModel):
    options: List[str] = Field(default_factory=list)


def _http_error(error: PosError) -> HTTPException:
    status = 404 if isinstance(error, NotFoundError) else 400
    return HTTPException(status_code=status, detail=error.to_dict())


def _get_order(order_id: str) -> Order:
    try:
        return state.registry.get(order_id)
    except NotFoundError as e:
        raise _http_error(e)


def _order_response(order: Order, result: Optional[OperationResult] = None) -> dict:
    if result is not None and not result.ok:
        raise _http_error(result.error)
    body = order.snapshot().to_dict()
    if result is not None:
        body["ref"] = result.ref
    return body


def _product_dict(product) -> dict:
    return {
        "product_id": product.product_id,
        "name": product.name,
        "category": product.category,
        "base_price": str(product.base_price),
        "options": [
            {"option_id": o.option_id, "name": o.name, "price_delta": str(o.price_delta)}
            for o in product.options
        ],
    }


@app.get("/")
async def root():
    return {"status": "online", "message": "Coffee POS API Active", "shop": state.settings.shop_name}


@app.get("/catalog")
async def get_catalog(category: Optional[str] = None):
    products = state.catalog.products()
    if category:
        products = [p for p in products if p.category.lower() == category.lower()]
    return [_product_dict(p) for p in products]


@app.get("/catalog/{product_id}")
async def get_product(product_id: str):
    try:
        return _product_dict(state.catalog.find_product(product_id))
    except NotFoundError as e:
        raise _http_error(e)


@app.get("/customers")
async def list_customers():
    return [
        {
            "phone": c.phone,
            "name": c.full_name,
            "reward_points": c.reward_points,
            "label": str(c),
        }
        for c in state.customers.list()
    ]


@app.post("/orders", status_code=201)
async def open_order(req: Optional[OpenOrderRequest] = None):
    customer = None
    if req and req.customer_phone:
        match = state.customers.find(req.customer_phone)
        if match is None:
            raise _http_error(NotFoundError(f"Customer '{req.customer_phone}' not found"))
        customer = str(match)
    order = state.registry.open(customer=customer)
    return _order_response(order)


@app.get("/orders/{order_id}")
async def get_order(order_id: str):
    return _order_response(_get_order(order_id))


@app.post("/orders/{order_id}/items", status_code=201)
async def add_item(order_id: str, req: AddItemRequest):
    order = _get_order(order_id)
    try:
        product = state.catalog.find_product(req.product_id)
    except NotFoundError as e:
        raise _http_error(e)
    result = order.add_item(product, req.quantity, req.options)
    return _order_response(order, result)


@app.patch("/orders/{order_id}/items/{ref}")
async def update_quantity(order_id: str, ref: int, req: QuantityUpdate):
    order = _get_order(order_id)
    return _order_response(order, order.update_quantity(ref, req.quantity))


@app.put("/orders/{order_id}/items/{ref}/customization")
async def update_customization(order_id: str, ref: int, req: CustomizationUpdate):
    order = _get_order(order_id)
    return _order_response(order, order.update_customization(ref, req.options))


@app.delete("/orders/{order_id}/items/{ref}")
async def remove_item(order_id: str, ref: int):
    order = _get_order(order_id)
    return _order_response(order, order.remove_item(ref))


@app.get("/orders/{order_id}/items/{ref}/trace")
async def get_item_trace(order_id: str, ref: int):
    order = _get_order(order_id)
    if order.get_item(ref) is None:
        raise _http_error(NotFoundError(f"Line item {ref} not found in order"))
    return {"ref": ref, "trace": order.get_trace_text(ref).splitlines()}


@app.post("/orders/{order_id}/clear")
async def clear_order(order_id: str):
    order = _get_order(order_id)
    order.clear()
    return _order_response(order)


@app.post("/orders/{order_id}/checkout")
async def checkout(order_id: str):
    order = _get_order(order_id)
    if order.is_empty:
        raise HTTPException(
            status_code=400,
            detail={"code": "empty_order", "message": "Cannot complete an order with no items"}
        )
    snapshot = state.registry.close(order_id)
    logger.info("Checkout %s total %s", order_id, snapshot.totals.total)
    return snapshot.to_dict()
