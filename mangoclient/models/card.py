"""
MangoPay cards and card registration

Registering a card takes three steps:

1. init(): create the registration; the API answers with an AccessKey,
   PreregistrationData and the CardRegistrationUrl of the card tokenizer
2. send_registration_data(): post the card details to that external URL,
   without MangoPay credentials; it answers with "data=..."
3. register(data): hand the tokenizer answer back to MangoPay, which
   returns the CardId
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

from mangoclient.exceptions import ValidationError
from mangoclient.models.base import Timestamp, local
from mangoclient.services.action_registry import Operation
from mangoclient.services.entity_lifecycle import Resource
from mangoclient.services.response_decoder import decode_response

logger = logging.getLogger(__name__)

REGISTRATION_DATA_PREFIX = "data="


@dataclass
class Card(Resource):
    user_id: str = ""
    expiration_date: str = ""
    alias: str = ""
    card_provider: str = ""
    card_type: str = ""
    country: str = ""
    product: str = ""
    bank_code: str = ""
    active: bool = False
    currency: str = ""
    validity: str = ""

    def deactivate(self) -> "Card":
        """Cards cannot be reactivated once deactivated"""
        if not self.is_persisted:
            raise ValidationError("cannot deactivate a card without Id")
        response = self._require_service().dispatch(Operation.DEACTIVATE_CARD, {"Id": self.id, "Active": False})
        self.replace_state(decode_response(response, Card))
        return self


@dataclass
class CardRegistration(Resource):
    status: str = ""
    result_code: str = ""
    result_message: str = ""
    execution_date: Timestamp = Timestamp()
    user_id: str = ""
    currency: str = ""
    access_key: str = ""
    preregistration_data: str = ""
    card_registration_url: str = ""
    card_registration_data: str = ""
    registration_data: str = ""
    card_type: str = ""
    card_id: str = ""

    # set once init() succeeded
    initialized: bool = local(False)

    create_operation = Operation.CREATE_CARD_REGISTRATION
    read_only_fields = frozenset(
        {
            "AccessKey",
            "CardId",
            "CardRegistrationData",
            "CardRegistrationUrl",
            "CardType",
            "PreregistrationData",
            "RegistrationData",
            "Tag",
        }
    )

    def validate(self) -> None:
        if not self.user_id:
            raise ValidationError("card registration user has empty Id")
        if not self.currency:
            raise ValidationError("card registration currency is required")

    def init(self) -> "CardRegistration":
        self.save()
        self.initialized = True
        logger.info(f"💳 Card registration {self.id} initialized")
        return self

    def send_registration_data(self, card_number: str, expiration_date: str, cvx: str, return_url: str = "") -> str:
        """
        Post card details to the external tokenizer

        Meant for testing only: in production the card form is posted by the
        cardholder's browser straight to CardRegistrationUrl.
        """
        if not self.initialized:
            raise ValidationError("missing pre-registration data and access key; call init() first")
        form = {
            "data": self.preregistration_data,
            "accessKeyRef": self.access_key,
            "cardNumber": card_number,
            "cardExpirationDate": expiration_date,
            "cardCvx": cvx,
        }
        if return_url:
            form["returnURL"] = return_url

        response = self._require_service().raw_request(
            "POST",
            self.card_registration_url,
            body=urlencode(form),
            content_type="application/x-www-form-urlencoded",
            authenticated=False,
        )
        self.card_registration_data = response.text
        return self.card_registration_data

    def register(self, registration_data: str) -> "CardRegistration":
        if not registration_data.startswith(REGISTRATION_DATA_PREFIX):
            raise ValidationError(f"invalid registration data, must start with {REGISTRATION_DATA_PREFIX}")
        if not self.is_persisted:
            raise ValidationError("card registration has no Id; call init() first")
        response = self._require_service().dispatch(
            Operation.SEND_CARD_REGISTRATION_DATA,
            {"Id": self.id, "RegistrationData": registration_data},
        )
        self.replace_state(decode_response(response, CardRegistration))
        self.card_registration_data = registration_data
        logger.info(f"💳 Card registration {self.id} completed, card {self.card_id}")
        return self

    def card(self) -> Card:
        if not self.card_id:
            raise ValidationError("card registration has no CardId yet")
        return self._require_service().card(self.card_id)
