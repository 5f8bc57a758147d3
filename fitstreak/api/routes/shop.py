from __future__ import annotations

from dataclasses import asdict
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, Query, Request

from fitstreak.api.routes.gamification_models import (
    OwnedItemResponse,
    OwnedItemsResponse,
    PurchaseRequest,
    PurchaseResponse,
    SeedCatalogResponse,
    ShopCatalogResponse,
    ShopItemResponse,
)
from fitstreak.api.routes.internal_helpers import as_http_exception, assert_internal_access
from fitstreak.core.config import get_settings
from fitstreak.db.transactions import run_in_transaction
from fitstreak.economy.errors import GamificationError
from fitstreak.economy.shop.service import ShopService

router = APIRouter(tags=["shop"])


@router.get("/v1/shop/items", response_model=ShopCatalogResponse)
async def get_shop_catalog(
    request: Request,
    include_disabled: bool = Query(default=False),
) -> ShopCatalogResponse:
    assert_internal_access(request)

    try:
        items = await run_in_transaction(
            lambda session: ShopService.get_shop_catalog(session, include_disabled=include_disabled),
            operation="get_shop_catalog",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc
    return ShopCatalogResponse(items=[ShopItemResponse(**asdict(item)) for item in items])


@router.get("/v1/users/{user_id}/owned-items", response_model=OwnedItemsResponse)
async def get_owned_items(user_id: str, request: Request) -> OwnedItemsResponse:
    assert_internal_access(request)

    try:
        items = await run_in_transaction(
            lambda session: ShopService.get_owned_items(session, user_id=user_id),
            operation="get_owned_items",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc
    return OwnedItemsResponse(items=[OwnedItemResponse(**asdict(item)) for item in items])


@router.post("/v1/users/{user_id}/purchases", response_model=PurchaseResponse)
async def purchase_item(user_id: str, payload: PurchaseRequest, request: Request) -> PurchaseResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    try:
        result = await run_in_transaction(
            lambda session: ShopService.purchase_item(
                session,
                user_id=user_id,
                item_id=payload.item_id,
                quantity=payload.quantity,
                now_utc=now_utc,
            ),
            operation="purchase_item",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc

    return PurchaseResponse(
        success=result.success,
        message=result.message,
        item_id=result.item_id,
        quantity=result.quantity,
        total_cost=result.total_cost,
        gems_balance=result.gems_balance,
        owned_quantity=result.owned_quantity,
    )


@router.post("/internal/shop/seed", response_model=SeedCatalogResponse)
async def seed_shop_catalog(request: Request) -> SeedCatalogResponse:
    assert_internal_access(request)

    now_utc = datetime.now(timezone.utc)
    image_base_url = get_settings().shop_image_base_url
    try:
        seeded = await run_in_transaction(
            lambda session: ShopService.seed_catalog(
                session,
                now_utc=now_utc,
                image_base_url=image_base_url,
            ),
            operation="seed_shop_catalog",
        )
    except GamificationError as exc:
        raise as_http_exception(exc) from exc
    if seeded <= 0:
        raise HTTPException(status_code=500, detail={"code": "E_SEED_EMPTY"})

    return SeedCatalogResponse(
        success=True,
        message=f"Successfully seeded {seeded} shop items.",
        seeded_items=seeded,
    )
