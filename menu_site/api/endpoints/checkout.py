import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from menu_site.api.dependencies import SiteServices, get_services
from menu_site.error_handler import ErrorHandler, MerchError

logger = logging.getLogger(__name__)

router = APIRouter()
error_handler = ErrorHandler()


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Left untyped so a malformed cart reaches the resolver and becomes EmptyCart.
    items: Any = Field(default=None, description="Cart lines: [{id, qty}]")
    # Non-string keys are ignored by the resolver, like oversized ones.
    idempotency_key: Any = Field(
        default=None,
        alias="idempotencyKey",
        description="Optional client token; repeated submissions with the same token reuse one payment link",
    )


@router.post("/checkout", tags=["Checkout"])
async def create_checkout(
    body: Optional[CheckoutRequest] = None,
    services: SiteServices = Depends(get_services),
):
    """Create a hosted payment link for the submitted cart."""
    items = body.items if body is not None else None
    idempotency_key = body.idempotency_key if body is not None else None
    try:
        session = await services.checkout.build_checkout_session(items, idempotency_key=idempotency_key)
    except MerchError as e:
        status_code, payload = error_handler.to_response(e, context={"endpoint": "checkout"})
        return JSONResponse(status_code=status_code, content=payload)
    return {"url": session.url}
