from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, Field, ValidationError

from menu_site.integrations.contracts.catalog import (
    CatalogImage,
    CatalogItem,
    CatalogObject,
    CatalogVariation,
    InventoryRecord,
)
from menu_site.integrations.contracts.checkout import PaymentLinkResponse


class IntegrationResponseError(ValueError):
    def __init__(self, message: str, *, payload: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.payload = payload or {}


# ---------------------------------------------------------------------------
# Square payload models (only the fields we read)
# ---------------------------------------------------------------------------

class MoneyModel(BaseModel):
    amount: Optional[int] = None
    currency: Optional[str] = None


class ItemVariationDataModel(BaseModel):
    item_id: Optional[str] = None
    name: Optional[str] = None
    price_money: Optional[MoneyModel] = None
    image_ids: List[str] = Field(default_factory=list)


class CatalogObjectModel(BaseModel):
    type: str
    id: str
    is_deleted: bool = False
    item_data: Optional[Dict[str, Any]] = None
    item_variation_data: Optional[ItemVariationDataModel] = None
    image_data: Optional[Dict[str, Any]] = None


class CatalogPageModel(BaseModel):
    objects: List[CatalogObjectModel] = Field(default_factory=list)
    cursor: Optional[str] = None


class InventoryCountModel(BaseModel):
    catalog_object_id: str
    state: str = "IN_STOCK"
    location_id: Optional[str] = None
    quantity: Union[str, int, float, None] = "0"


class InventoryPageModel(BaseModel):
    counts: List[InventoryCountModel] = Field(default_factory=list)
    cursor: Optional[str] = None


class PaymentLinkModel(BaseModel):
    id: str = ""
    url: str
    order_id: str = ""


class PaymentLinkEnvelopeModel(BaseModel):
    payment_link: PaymentLinkModel


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------

def normalize_catalog_page(raw: Dict[str, Any]) -> Tuple[List[CatalogObject], Optional[str]]:
    """Convert one ``ListCatalog`` page into contract objects plus the next cursor.

    Variations nested under ``item_data.variations`` are emitted as well; the
    caller de-duplicates by id.
    """
    page = _build_model(CatalogPageModel, raw, raw)
    out: List[CatalogObject] = []
    for obj in page.objects:
        if obj.is_deleted:
            continue
        if obj.type == "ITEM":
            data = obj.item_data or {}
            out.append(
                CatalogItem(
                    id=obj.id,
                    name=str(data.get("name") or ""),
                    image_ids=tuple(str(i) for i in data.get("image_ids") or ()),
                )
            )
            for nested in data.get("variations") or ():
                nested_obj = _build_model(CatalogObjectModel, nested, raw)
                if nested_obj.type == "ITEM_VARIATION" and not nested_obj.is_deleted:
                    out.append(_variation_from_model(nested_obj))
        elif obj.type == "ITEM_VARIATION":
            out.append(_variation_from_model(obj))
        elif obj.type == "IMAGE":
            url = (obj.image_data or {}).get("url")
            if url:
                out.append(CatalogImage(id=obj.id, url=str(url)))
    return out, page.cursor or None


def normalize_inventory_page(raw: Dict[str, Any]) -> Tuple[Dict[str, InventoryRecord], Optional[str]]:
    page = _build_model(InventoryPageModel, raw, raw)
    totals: Dict[str, float] = {}
    for count in page.counts:
        if count.state != "IN_STOCK":
            continue
        try:
            qty = float(count.quantity)
        except (TypeError, ValueError) as exc:
            raise IntegrationResponseError(f"Invalid inventory quantity: {count.quantity!r}", payload=raw) from exc
        totals[count.catalog_object_id] = totals.get(count.catalog_object_id, 0.0) + qty

    records = {}
    for variation_id, qty in totals.items():
        qty = max(qty, 0.0)
        # Square sends decimal strings; whole counts stay ints in the listing.
        qty = int(qty) if qty.is_integer() else qty
        records[variation_id] = InventoryRecord(variation_id=variation_id, quantity=qty, in_stock=qty > 0)
    return records, page.cursor or None


def normalize_payment_link_response(raw: Dict[str, Any]) -> PaymentLinkResponse:
    envelope = _build_model(PaymentLinkEnvelopeModel, raw, raw)
    link = envelope.payment_link
    if not link.url.strip():
        raise IntegrationResponseError("Payment link response has an empty url.", payload=raw)
    return PaymentLinkResponse(url=link.url, link_id=link.id, order_id=link.order_id)


def describe_provider_errors(raw: Any) -> str:
    """Flatten Square's ``errors`` array into one log-friendly line."""
    if not isinstance(raw, dict):
        return ""
    parts = []
    for err in raw.get("errors") or []:
        if isinstance(err, dict):
            parts.append(f"{err.get('category', '?')}/{err.get('code', '?')}: {err.get('detail', '')}".strip())
    return "; ".join(parts)


def _variation_from_model(obj: CatalogObjectModel) -> CatalogVariation:
    data = obj.item_variation_data or ItemVariationDataModel()
    price = data.price_money.amount if data.price_money else None
    return CatalogVariation(
        id=obj.id,
        item_id=data.item_id or None,
        label=data.name or "",
        price_cents=price,
        image_ids=tuple(data.image_ids),
    )


def _build_model(model_type, payload: Any, raw: Any):
    if not isinstance(payload, dict):
        raise IntegrationResponseError(f"Expected a JSON object, got {type(payload).__name__}.")
    try:
        return model_type(**payload)
    except ValidationError as exc:
        raise IntegrationResponseError(
            f"Response validation failed: {exc}",
            payload=raw if isinstance(raw, dict) else None,
        ) from exc
