"""
HTTP 接口入口 (FastAPI)。
提供商品卡片数据查询和购物车操作，目录数据来自 STOREFRONT_CATALOG 或内置示例。
"""
import logging
from collections import deque
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from storefront.config import API_HOST, API_PORT, API_PREFIX, CATALOG_PATH, SAMPLE_SEED, setup_logging
from storefront.exceptions import OutOfStockError, ProductNotFoundError, VariantNotFoundError
from storefront.models import ProductId
from storefront.service import CartService, CatalogService

logger = logging.getLogger(__name__)

app = FastAPI()


def init_services(catalog: Optional[CatalogService] = None) -> None:
    """初始化 (或重置) 目录和购物车服务。"""
    app.state.catalog = catalog or CatalogService.from_source(CATALOG_PATH, seed=SAMPLE_SEED)
    # 只保留最近一条成功提示
    app.state.notifications = deque(maxlen=1)
    app.state.cart = CartService(app.state.catalog, notify=app.state.notifications.append)


init_services()


class AddToCartRequest(BaseModel):
    product_id: ProductId
    variant_id: Optional[str] = None


@app.get("/api")
def health():
    return {"message": "API is running!"}


@app.get(f"{API_PREFIX}/products")
def list_products():
    catalog: CatalogService = app.state.catalog
    cards = [catalog.card(p.id).to_dict() for p in catalog.list_products()]
    return {"code": 0, "data": cards}


@app.get(f"{API_PREFIX}/products/{{product_id}}")
def get_product(product_id: str, variant_id: Optional[str] = None):
    try:
        card = app.state.catalog.card(product_id, variant_id)
    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"code": 0, "data": card.to_dict()}


@app.post(f"{API_PREFIX}/cart")
def add_cart_item(req: AddToCartRequest):
    cart: CartService = app.state.cart
    try:
        entry = cart.add(req.product_id, req.variant_id)
    except (ProductNotFoundError, VariantNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OutOfStockError as e:
        raise HTTPException(status_code=409, detail=str(e))

    message = app.state.notifications[-1] if app.state.notifications else ""
    return {"code": 0, "message": message, "data": entry}


@app.get(f"{API_PREFIX}/cart")
def get_cart():
    return {"code": 0, "data": app.state.cart.summary()}


@app.delete(f"{API_PREFIX}/cart/{{key}}")
def remove_cart_item(key: str):
    cart: CartService = app.state.cart
    try:
        remaining = cart.remove(key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Cart line not found: {key}")
    return {"code": 0, "data": {"line": remaining, "cart": cart.summary()}}


if __name__ == "__main__":
    setup_logging()
    uvicorn.run(app, host=API_HOST, port=API_PORT)
