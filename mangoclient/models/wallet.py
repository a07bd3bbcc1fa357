"""MangoPay wallets"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Money, wire
from mangoclient.services.action_registry import Operation
from mangoclient.services.entity_lifecycle import Resource


@dataclass
class Wallet(Resource):
    owners: List[str] = wire(default_factory=list)
    description: str = ""
    currency: str = ""
    balance: Money = Money()

    create_operation = Operation.CREATE_WALLET
    update_operation = Operation.EDIT_WALLET
    read_only_fields = frozenset({"Balance"})

    def validate(self) -> None:
        if self.is_persisted:
            return
        if not self.owners:
            raise ValidationError("wallet needs at least one owner")
        for index, owner in enumerate(self.owners):
            if not owner:
                raise ValidationError(f"empty Id for owner {index}, unable to create wallet")
        if not self.currency:
            raise ValidationError("wallet currency is required")

    def _prepare_payload(self, payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        if not creating:
            # owners and currency are fixed once the wallet exists
            payload.pop("Owners", None)
            payload.pop("Currency", None)
        return payload

    def transactions(self, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        return self._require_service().wallet_transactions(self, query=query)

    def banking_aliases(self) -> List[Any]:
        return self._require_service().banking_aliases(self)

    def __str__(self) -> str:
        return f"Wallet {self.id or 'unsaved'} ({self.description}): {self.balance}"
