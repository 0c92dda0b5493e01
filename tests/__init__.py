"""Test-suite helpers: request payload generators shared across modules."""
from decimal import Decimal
from typing import Any, Dict


def beer_payload(index: int = 0, **overrides: Any) -> Dict[str, Any]:
    """A valid beer creation payload in wire (camelCase) form."""
    payload: Dict[str, Any] = {
        "beerName": f"Test Beer {index}",
        "beerStyle": "IPA",
        "upc": f"{index:012d}",
        "quantityOnHand": 10 + index,
        "price": 12.5,
    }
    payload.update(overrides)
    return payload


def customer_payload(name: str = "Ada Lovelace", **overrides: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"customerName": name}
    payload.update(overrides)
    return payload


def beer_row(index: int = 0, **overrides: Any) -> Dict[str, Any]:
    """Entity keyword arguments for inserting a beer through a repository."""
    row: Dict[str, Any] = {
        "beer_name": f"Test Beer {index}",
        "beer_style": "IPA",
        "upc": f"{index:012d}",
        "quantity_on_hand": 10 + index,
        "price": Decimal("12.50"),
    }
    row.update(overrides)
    return row
