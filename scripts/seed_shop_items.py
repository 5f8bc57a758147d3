from __future__ import annotations

import argparse
import asyncio
from datetime import datetime, timezone

from fitstreak.core.config import get_settings
from fitstreak.core.logging import configure_logging
from fitstreak.db.session import dispose_engine
from fitstreak.db.transactions import run_in_transaction
from fitstreak.economy.shop.service import ShopService


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upsert the built-in shop catalog")
    parser.add_argument(
        "--image-base-url",
        default=None,
        help="Overrides SHOP_IMAGE_BASE_URL; images resolve to <base>/shop-items/<id>.png",
    )
    return parser.parse_args()


async def _seed(image_base_url: str) -> int:
    now_utc = datetime.now(timezone.utc)
    try:
        return await run_in_transaction(
            lambda session: ShopService.seed_catalog(
                session,
                now_utc=now_utc,
                image_base_url=image_base_url,
            ),
            operation="seed_shop_catalog",
        )
    finally:
        await dispose_engine()


def main() -> int:
    args = _parse_args()
    settings = get_settings()
    configure_logging(settings.log_level)
    image_base_url = args.image_base_url if args.image_base_url is not None else settings.shop_image_base_url
    seeded = asyncio.run(_seed(image_base_url))
    print(f"seed_shop_items: seeded={seeded}")  # noqa: T201
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
