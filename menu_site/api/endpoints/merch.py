import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from menu_site.api.dependencies import SiteServices, get_services
from menu_site.error_handler import ErrorHandler, MerchError
from menu_site.integrations.contracts.merch import MerchItem

logger = logging.getLogger(__name__)

router = APIRouter()
error_handler = ErrorHandler()


@router.get("/merch", tags=["Merch"])
async def list_merch(services: SiteServices = Depends(get_services)):
    """Grouped merch items with variations and stock, for the carousel."""
    try:
        items = await services.lookup.list_items()
    except MerchError as e:
        status_code, payload = error_handler.to_response(e, context={"endpoint": "merch"})
        return JSONResponse(status_code=status_code, content=payload)
    return [_merch_item_to_dict(item) for item in items]


def _merch_item_to_dict(item: MerchItem) -> Dict[str, Any]:
    return {
        "id": item.item_id,
        "name": item.name,
        "imageUrl": item.image_url,
        "secondaryImages": list(item.gallery_image_urls),
        "itemSoldOut": item.item_sold_out,
        "variations": [
            {
                "id": v.id,
                "label": v.label,
                "price": v.price,
                "priceCents": v.price_cents,
                "quantity": v.quantity,
                "inStock": v.in_stock,
            }
            for v in item.variations
        ],
    }
