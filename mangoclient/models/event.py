"""MangoPay events, listed from the API or received on a hook callback"""

from dataclasses import dataclass
from typing import Mapping

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Timestamp, wire


@dataclass
class Event:
    # the API spells it "RessourceId"
    resource_id: str = wire("", name="RessourceId")
    event_type: str = ""
    date: Timestamp = Timestamp()

    @classmethod
    def from_query(cls, query: Mapping[str, str]) -> "Event":
        """Parse the query string MangoPay appends to a hook URL"""
        resource_id = query.get("RessourceId") or query.get("ResourceId") or ""
        raw_date = query.get("Date") or ""
        try:
            date = Timestamp(int(raw_date))
        except ValueError:
            raise ValidationError(f"unable to parse value of 'Date' query option: {raw_date!r}") from None
        return cls(resource_id=resource_id, event_type=query.get("EventType") or "", date=date)
