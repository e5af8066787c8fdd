"""Fixed hotel catalog for the destination pool and the comfort-band filter."""
from __future__ import annotations

from typing import Dict, List, Tuple

from travel_recommender.core.schemas import Hotel
from travel_recommender.core.types import Comfort

MAX_SUGGESTIONS = 2

# Nightly price bands per comfort tier; the mid band is inclusive.
_BUDGET_BELOW = 150
_PREMIUM_ABOVE = 200
_MID_BAND: Tuple[int, int] = (100, 250)

HOTEL_CATALOG: Dict[str, List[Hotel]] = {
    "Lisbon, Portugal": [
        Hotel(name="casa do bairro", price_per_night=95, rating=4.5, type="guesthouse"),
        Hotel(name="memmo alfama", price_per_night=210, rating=4.7, type="boutique"),
        Hotel(name="lumiares hotel", price_per_night=165, rating=4.6, type="boutique"),
        Hotel(name="pestana palace", price_per_night=320, rating=4.8, type="luxury"),
        Hotel(name="the independente", price_per_night=60, rating=4.3, type="hostel"),
    ],
    "Canary Islands, Spain": [
        Hotel(name="hotel rural orotava", price_per_night=90, rating=4.4, type="rural"),
        Hotel(name="barcelo santiago", price_per_night=135, rating=4.3, type="resort"),
        Hotel(name="h10 conquistador", price_per_night=190, rating=4.4, type="resort"),
        Hotel(name="bahia del duque", price_per_night=380, rating=4.8, type="luxury"),
        Hotel(name="la laguna surf hostel", price_per_night=45, rating=4.2, type="hostel"),
    ],
    "Crete, Greece": [
        Hotel(name="kritamare studios", price_per_night=70, rating=4.5, type="apartment"),
        Hotel(name="aquila atlantis", price_per_night=125, rating=4.3, type="hotel"),
        Hotel(name="the island concept", price_per_night=160, rating=4.6, type="boutique"),
        Hotel(name="minos beach art hotel", price_per_night=290, rating=4.7, type="resort"),
        Hotel(name="blue palace", price_per_night=450, rating=4.9, type="luxury"),
    ],
    "Nice, France": [
        Hotel(name="villa saint exupery", price_per_night=55, rating=4.2, type="hostel"),
        Hotel(name="hotel villa rivoli", price_per_night=140, rating=4.4, type="hotel"),
        Hotel(name="hotel la perouse", price_per_night=230, rating=4.6, type="boutique"),
        Hotel(name="hyatt regency palais", price_per_night=310, rating=4.5, type="luxury"),
        Hotel(name="hotel negresco", price_per_night=480, rating=4.7, type="luxury"),
    ],
}


def in_comfort_band(price_per_night: float, comfort: Comfort) -> bool:
    if comfort == "budget":
        return price_per_night < _BUDGET_BELOW
    if comfort == "premium":
        return price_per_night > _PREMIUM_ABOVE
    low, high = _MID_BAND
    return low <= price_per_night <= high


def _capitalize_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def hotel_suggestions(destination: str, comfort: Comfort) -> List[Hotel]:
    """Return at most two catalog hotels inside the comfort tier's price band."""

    matches = [
        hotel.model_copy(update={"name": _capitalize_first(hotel.name)})
        for hotel in HOTEL_CATALOG.get(destination, [])
        if in_comfort_band(hotel.price_per_night, comfort)
    ]
    return matches[:MAX_SUGGESTIONS]
