"""Typed views of the Stripe objects the membership reconciler reads."""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

class StripeSubscription(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    # Kept as a plain string: statuses Stripe adds later must still parse.
    status: str
    customer: Optional[str] = None
    product_id: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def flatten_stripe_payload(cls, data: Any) -> Any:
        """Pull the customer id and first item's product id out of the nested payload."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        customer = data.get("customer")
        if isinstance(customer, dict):
            data["customer"] = customer.get("id")
        if "product_id" not in data:
            items = data.get("items")
            items = items.get("data") if isinstance(items, dict) else None
            if items and isinstance(items[0], dict):
                price = items[0].get("price")
                product = price.get("product") if isinstance(price, dict) else None
                data["product_id"] = product.get("id") if isinstance(product, dict) else product
        return data


class StripeProduct(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    metadata: Optional[dict[str, str]] = None
