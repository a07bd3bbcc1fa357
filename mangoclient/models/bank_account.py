"""
MangoPay bank accounts and banking aliases

Each bank account type has its own required fields; fields that belong to
other types are dropped from the create payload.
"""

from dataclasses import dataclass
from typing import Any, Dict

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import wire
from mangoclient.models.enums import BankAccountType
from mangoclient.services.action_registry import Operation
from mangoclient.services.entity_lifecycle import Resource

TYPE_FIELDS = {
    BankAccountType.IBAN: ("IBAN", "BIC"),
    BankAccountType.GB: ("AccountNumber", "SortCode"),
    BankAccountType.US: ("AccountNumber", "ABA"),
    BankAccountType.CA: ("BankName", "InstitutionNumber", "BranchCode", "AccountNumber"),
    BankAccountType.OTHER: ("AccountNumber", "BIC", "Country"),
}
REQUIRED_FIELDS = {
    BankAccountType.IBAN: ("IBAN", "BIC"),
    BankAccountType.GB: ("AccountNumber", "SortCode"),
    BankAccountType.US: ("AccountNumber", "ABA"),
    BankAccountType.CA: ("BankName", "InstitutionNumber", "BranchCode", "AccountNumber"),
    BankAccountType.OTHER: ("AccountNumber", "BIC"),
}
ALL_TYPE_FIELDS = frozenset(name for names in TYPE_FIELDS.values() for name in names)


@dataclass
class BankAccount(Resource):
    type: str = ""
    owner_name: str = ""
    owner_address: str = ""
    user_id: str = ""
    iban: str = wire("", name="IBAN")
    bic: str = wire("", name="BIC")
    account_number: str = ""
    sort_code: str = ""
    aba: str = wire("", name="ABA")
    bank_name: str = ""
    institution_number: str = ""
    branch_code: str = ""
    country: str = ""
    active: bool = True

    create_operation = Operation.CREATE_BANK_ACCOUNT
    read_only_fields = frozenset({"Active"})

    @property
    def account_type(self) -> BankAccountType:
        try:
            return BankAccountType(self.type)
        except ValueError:
            raise ValidationError(f"unknown bank account type: {self.type!r}") from None

    def validate(self) -> None:
        if not self.user_id:
            raise ValidationError("bank account user has empty Id")
        if not self.owner_name or not self.owner_address:
            raise ValidationError("bank account needs OwnerName and OwnerAddress")
        account_type = self.account_type
        payload = self.build_payload(creating=True)
        missing = [name for name in REQUIRED_FIELDS[account_type] if not payload.get(name)]
        if missing:
            raise ValidationError(
                f"missing full {account_type.value} information: {', '.join(missing)}",
                {"missing": missing},
            )

    def _prepare_payload(self, payload: Dict[str, Any], creating: bool) -> Dict[str, Any]:
        keep = set(TYPE_FIELDS[self.account_type])
        return {k: v for k, v in payload.items() if k not in ALL_TYPE_FIELDS or k in keep}

    def _path_params(self, creating: bool) -> Dict[str, Any]:
        return {"AccountType": self.account_type.value.lower()}


@dataclass
class BankingAlias(Resource):
    """IBAN alias on which a wallet receives bank wires"""

    credited_user_id: str = ""
    wallet_id: str = ""
    type: str = "IBAN"
    country: str = ""
    owner_name: str = ""
    active: bool = False
    iban: str = wire("", name="IBAN")
    bic: str = wire("", name="BIC")

    create_operation = Operation.CREATE_BANKING_ALIAS
    read_only_fields = frozenset({"Active", "IBAN", "BIC", "Type"})

    def validate(self) -> None:
        if not self.wallet_id:
            raise ValidationError("wallet has empty Id")
        if not self.owner_name or not self.country:
            raise ValidationError("banking alias needs OwnerName and Country")
