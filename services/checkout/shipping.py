from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import ValidationError

from services.order_service.schemas import ShippingAddress

SHIPPING_FIELDS = ("full_name", "email", "phone", "address", "city", "state", "zip_code")


def validate_shipping(data: Mapping[str, Any]) -> Tuple[Optional[ShippingAddress], Dict[str, str]]:
    """
    Returns (address, {}) when every rule passes, otherwise (None, errors)
    with one message per offending field.
    """
    values = {
        name: "" if value is None else str(value)
        for name, value in data.items()
        if name in ShippingAddress.model_fields
    }
    try:
        return ShippingAddress(**values), {}
    except ValidationError as exc:
        errors: Dict[str, str] = {}
        for err in exc.errors():
            errors.setdefault(str(err["loc"][0]), err["msg"])
        return None, errors


def validate_field(data: Mapping[str, Any], name: str) -> Optional[str]:
    _, errors = validate_shipping(data)
    return errors.get(name)
