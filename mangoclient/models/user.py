"""
MangoPay users
Every user, whether fetched through the generic listing or as a NaturalUser
or LegalUser, acts as a Consumer: it owns wallets, cards, bank accounts and
KYC documents and can list its transactions.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Timestamp, local
from mangoclient.services.action_registry import Operation
from mangoclient.services.entity_lifecycle import Resource


class Consumer:
    """Capability shared by every user variant"""

    @property
    def consumer_id(self) -> str:
        if not self.id:
            raise ValidationError(f"{type(self).__name__} has empty Id")
        return self.id

    def wallets(self, refresh: bool = False) -> List[Any]:
        if self._wallets is None or refresh:
            self._wallets = self._require_service().wallets(self)
        return self._wallets

    def transfers(self, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        return self._require_service().transfers(self, query=query)

    def cards(self, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        return self._require_service().cards(self, query=query)

    def bank_accounts(self, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        return self._require_service().bank_accounts(self, query=query)

    def documents(self, query: Optional[Dict[str, Any]] = None) -> List[Any]:
        return self._require_service().user_documents(self, query=query)


@dataclass
class User(Resource, Consumer):
    """Common view returned by the user listing endpoints"""

    person_type: str = ""
    email: str = ""
    _wallets: Optional[List[Any]] = local()

    read_only_fields = frozenset({"PersonType"})

    @property
    def is_natural(self) -> bool:
        return self.person_type == "NATURAL"

    @property
    def is_legal(self) -> bool:
        return self.person_type == "LEGAL"


@dataclass
class NaturalUser(User):
    first_name: str = ""
    last_name: str = ""
    address: str = ""
    birthday: Timestamp = Timestamp()
    nationality: str = ""
    country_of_residence: str = ""
    occupation: str = ""
    income_range: str = ""
    proof_of_identity: str = ""
    proof_of_address: str = ""

    create_operation = Operation.CREATE_NATURAL_USER
    update_operation = Operation.EDIT_NATURAL_USER
    read_only_fields = frozenset({"PersonType", "ProofOfIdentity", "ProofOfAddress"})

    def validate(self) -> None:
        if not self.is_persisted:
            missing = [
                name
                for name, value in (
                    ("FirstName", self.first_name),
                    ("LastName", self.last_name),
                    ("Email", self.email),
                    ("Nationality", self.nationality),
                    ("CountryOfResidence", self.country_of_residence),
                )
                if not value
            ]
            if missing:
                raise ValidationError(f"natural user is missing {', '.join(missing)}", {"missing": missing})

    def __str__(self) -> str:
        return f"{self.first_name} {self.last_name} <{self.email}> ({self.id or 'unsaved'})"


@dataclass
class LegalUser(User):
    name: str = ""
    legal_person_type: str = ""
    headquarters_address: str = ""
    legal_representative_first_name: str = ""
    legal_representative_last_name: str = ""
    legal_representative_address: str = ""
    legal_representative_email: str = ""
    legal_representative_birthday: Timestamp = Timestamp()
    legal_representative_nationality: str = ""
    legal_representative_country_of_residence: str = ""
    statute: str = ""
    proof_of_registration: str = ""
    shareholder_declaration: str = ""

    create_operation = Operation.CREATE_LEGAL_USER
    update_operation = Operation.EDIT_LEGAL_USER
    read_only_fields = frozenset({"PersonType", "Statute", "ProofOfRegistration", "ShareholderDeclaration"})

    def validate(self) -> None:
        if not self.is_persisted:
            missing = [
                name
                for name, value in (
                    ("Name", self.name),
                    ("Email", self.email),
                    ("LegalPersonType", self.legal_person_type),
                    ("LegalRepresentativeFirstName", self.legal_representative_first_name),
                    ("LegalRepresentativeLastName", self.legal_representative_last_name),
                )
                if not value
            ]
            if missing:
                raise ValidationError(f"legal user is missing {', '.join(missing)}", {"missing": missing})

    def __str__(self) -> str:
        return f"{self.name} <{self.email}> ({self.id or 'unsaved'})"
