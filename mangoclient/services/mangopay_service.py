"""
MangoPay API Service
Request dispatcher, entity factories and fetchers for the MangoPay v2 REST API

dispatch() is the single path every API call takes:
resolve route -> render path -> build body/query -> authorize -> send with
retry -> classify non-2xx responses. Entities never build URLs themselves.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar

import requests

from mangoclient.config import Config, Credential
from mangoclient.exceptions import ValidationError
from mangoclient.models.bank_account import BankAccount, BankingAlias
from mangoclient.models.base import Money
from mangoclient.models.card import Card, CardRegistration
from mangoclient.models.enums import AuthMode, BankAccountType, DocumentType, EventType
from mangoclient.models.event import Event
from mangoclient.models.hook import Hook
from mangoclient.models.kyc import Document
from mangoclient.models.mandate import Mandate
from mangoclient.models.payin import BankWireDirectPayIn, DirectDebitWebPayIn, DirectPayIn, PayIn, WebPayIn
from mangoclient.models.payout import PayOut
from mangoclient.models.refund import Refund
from mangoclient.models.transfer import Transfer
from mangoclient.models.user import Consumer, LegalUser, NaturalUser, User
from mangoclient.models.wallet import Wallet
from mangoclient.services.action_registry import Operation, render_path, resolve_route
from mangoclient.services.auth_provider import AuthProvider, BasicAuthProvider, OAuthTokenProvider
from mangoclient.services.response_decoder import decode_list, decode_response, raise_for_service_error
from mangoclient.services.retry_service import HTTPRetryConfig, RetryingTransport
from mangoclient.utils.data_sanitizer import DataSanitizer

logger = logging.getLogger(__name__)
E = TypeVar("E")

JSON_CONTENT_TYPE = "application/json"


def _consumer_id(consumer: Any, role: str = "user") -> str:
    if not isinstance(consumer, Consumer):
        raise ValidationError(f"{role} must be a user, got {type(consumer).__name__}")
    if not consumer.id:
        raise ValidationError(f"{role} has empty Id")
    return consumer.id


def _entity_id(entity: Any, role: str) -> str:
    if entity is None or not getattr(entity, "id", ""):
        raise ValidationError(f"{role} has empty Id")
    return entity.id


class MangoPayService:
    """Entry point of the client; one instance per set of credentials"""

    def __init__(
        self,
        credential: Credential,
        auth_mode: AuthMode = AuthMode.OAUTH,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        retry: Optional[HTTPRetryConfig] = None,
        auth: Optional[AuthProvider] = None,
        sleep=None,
    ):
        self.credential = credential
        self.root_url = credential.root_url
        self.timeout = timeout
        self.session = session or requests.Session()

        transport_kwargs = {"sleep": sleep} if sleep is not None else {}
        self.transport = RetryingTransport(self.session, retry or HTTPRetryConfig(), **transport_kwargs)

        if auth is not None:
            self.auth = auth
        elif auth_mode is AuthMode.BASIC:
            self.auth = BasicAuthProvider(credential.client_id, credential.passphrase)
        else:
            self.auth = OAuthTokenProvider(
                credential.client_id,
                credential.passphrase,
                self.root_url,
                session=self.session,
                timeout=timeout,
                safety_margin=Config.MANGOPAY_TOKEN_SAFETY_MARGIN,
            )

        logger.info(
            f"🔧 MangoPayService initialized for client {credential.client_id} "
            f"({credential.environment.value}, {auth_mode.value} auth)"
        )

    @classmethod
    def from_config(cls, session: Optional[requests.Session] = None) -> "MangoPayService":
        return cls(
            Config.credential(),
            auth_mode=Config.auth_mode(),
            session=session,
            timeout=Config.MANGOPAY_TIMEOUT,
            retry=Config.retry_config(),
        )

    # ============ DISPATCH ============

    def dispatch(
        self,
        operation: Operation,
        payload: Optional[Dict[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
        path_params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """
        Send one API operation and return the raw 2xx response

        ``payload`` fills the path placeholders; for POST/PUT it is also the
        JSON body, for GET/DELETE its remaining keys become query parameters.
        ``path_params`` supplies placeholder values that must not be sent.
        """
        route = resolve_route(operation)
        values = dict(payload or {})
        if path_params:
            values.update(path_params)
        path = render_path(operation, route, values)
        url = f"{self.root_url}{self.credential.client_id}{path}"

        body = None
        params: Dict[str, Any] = {}
        if route.method in ("POST", "PUT"):
            if payload is not None:
                body = json.dumps(payload)
        elif payload:
            params.update({k: v for k, v in payload.items() if k not in route.params})
        if query:
            params.update(query)

        return self.raw_request(route.method, url, body=body, params=params or None)

    def raw_request(
        self,
        method: str,
        url: str,
        body: Optional[str] = None,
        content_type: str = JSON_CONTENT_TYPE,
        authenticated: bool = True,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        """
        Send a request to an arbitrary URL

        ``authenticated=False`` is only for the card tokenizer, which must
        never see MangoPay credentials.
        """
        headers = {"Content-Type": content_type}
        authorize = self.auth.authorization if authenticated else None

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f">>> {method} {url} params={params} headers={DataSanitizer.sanitize_headers(headers)} "
                f"authenticated={authenticated} body={self._loggable_body(body, content_type)}"
            )

        response = self.transport.send(
            method, url, authorize=authorize, data=body, headers=headers, params=params, timeout=self.timeout
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"<<< {response.status_code} {url} body={(response.text or '')[:1000]}")

        raise_for_service_error(response)
        return response

    @staticmethod
    def _loggable_body(body: Optional[str], content_type: str) -> Any:
        if not body:
            return None
        if content_type == JSON_CONTENT_TYPE:
            try:
                return DataSanitizer.sanitize_payload(json.loads(body))
            except ValueError:
                return "[UNPARSEABLE]"
        return "[FORM DATA REDACTED]"

    def request_entity(
        self,
        cls: Type[E],
        operation: Operation,
        payload: Optional[Dict[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> E:
        entity = decode_response(self.dispatch(operation, payload, query=query), cls)
        return self._bind(entity)

    def request_list(
        self,
        cls: Type[E],
        operation: Operation,
        payload: Optional[Dict[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> List[E]:
        return [self._bind(e) for e in decode_list(self.dispatch(operation, payload, query=query), cls)]

    def _bind(self, entity: E) -> E:
        if hasattr(entity, "bind"):
            entity.bind(self)
        return entity

    # ============ FACTORIES ============

    def new_natural_user(self, **fields) -> NaturalUser:
        return NaturalUser(**fields).bind(self)

    def new_legal_user(self, **fields) -> LegalUser:
        return LegalUser(**fields).bind(self)

    def new_wallet(self, owners: List[Any], description: str, currency: str) -> Wallet:
        """Owners are users or user ids; an empty id fails before any request"""
        ids = []
        for index, owner in enumerate(owners):
            if isinstance(owner, Consumer):
                owner_id = owner.id
            elif isinstance(owner, str):
                owner_id = owner
            else:
                raise ValidationError(f"owner {index} must be a user or a user id, got {type(owner).__name__}")
            if not owner_id:
                raise ValidationError(f"empty Id for owner {index}, unable to create wallet")
            ids.append(owner_id)
        return Wallet(owners=ids, description=description, currency=currency).bind(self)

    def new_transfer(self, author: Any, amount: Money, fees: Money, source: Wallet, destination: Wallet) -> Transfer:
        return Transfer(
            author_id=_consumer_id(author, "transfer author"),
            debited_funds=amount,
            fees=fees,
            debited_wallet_id=_entity_id(source, "debited wallet"),
            credited_wallet_id=_entity_id(destination, "credited wallet"),
        ).bind(self)

    def new_web_payin(
        self,
        author: Any,
        amount: Money,
        fees: Money,
        credit: Wallet,
        return_url: str,
        culture: str = "EN",
        template_url: str = "",
    ) -> WebPayIn:
        payin = WebPayIn(
            author_id=_consumer_id(author, "pay-in author"),
            debited_funds=amount,
            fees=fees,
            credited_wallet_id=_entity_id(credit, "credited wallet"),
            return_url=return_url,
            culture=culture,
        )
        if template_url:
            payin.template_url_options = {"Payline": template_url}
        payin.bind(self).validate()
        return payin

    def new_direct_payin(
        self,
        author: Any,
        beneficiary: Any,
        card: Card,
        credit: Wallet,
        amount: Money,
        fees: Money,
        return_url: str,
    ) -> DirectPayIn:
        payin = DirectPayIn(
            author_id=_consumer_id(author, "pay-in author"),
            credited_user_id=_consumer_id(beneficiary, "pay-in beneficiary"),
            card_id=_entity_id(card, "card"),
            credited_wallet_id=_entity_id(credit, "credited wallet"),
            debited_funds=amount,
            fees=fees,
            secure_mode_return_url=return_url,
        )
        payin.bind(self).validate()
        return payin

    def new_bankwire_payin(self, author: Any, credit: Wallet, declared_amount: Money, declared_fees: Money) -> BankWireDirectPayIn:
        return BankWireDirectPayIn(
            author_id=_consumer_id(author, "pay-in author"),
            credited_wallet_id=_entity_id(credit, "credited wallet"),
            declared_debited_funds=declared_amount,
            declared_fees=declared_fees,
        ).bind(self)

    def new_direct_debit_payin(
        self,
        author: Any,
        credit: Wallet,
        amount: Money,
        fees: Money,
        return_url: str,
        direct_debit_type: str = "GIROPAY",
        culture: str = "EN",
    ) -> DirectDebitWebPayIn:
        payin = DirectDebitWebPayIn(
            author_id=_consumer_id(author, "pay-in author"),
            credited_wallet_id=_entity_id(credit, "credited wallet"),
            debited_funds=amount,
            fees=fees,
            return_url=return_url,
            direct_debit_type=direct_debit_type,
            culture=culture,
        )
        payin.bind(self).validate()
        return payin

    def new_payout(self, author: Any, amount: Money, fees: Money, source: Wallet, destination: BankAccount) -> PayOut:
        return PayOut(
            author_id=_consumer_id(author, "pay-out author"),
            debited_funds=amount,
            fees=fees,
            debited_wallet_id=_entity_id(source, "debited wallet"),
            bank_account_id=_entity_id(destination, "bank account"),
        ).bind(self)

    def new_card_registration(self, user: Any, currency: str) -> CardRegistration:
        return CardRegistration(user_id=_consumer_id(user), currency=currency).bind(self)

    def new_bank_account(
        self,
        user: Any,
        owner_name: str,
        owner_address: str,
        account_type: BankAccountType,
        **fields,
    ) -> BankAccount:
        return BankAccount(
            user_id=_consumer_id(user),
            owner_name=owner_name,
            owner_address=owner_address,
            type=BankAccountType(account_type).value,
            **fields,
        ).bind(self)

    def new_banking_alias(self, wallet: Wallet, owner_name: str, country: str) -> BankingAlias:
        return BankingAlias(
            wallet_id=_entity_id(wallet, "wallet"),
            owner_name=owner_name,
            country=country,
        ).bind(self)

    def new_document(self, user: Any, document_type: DocumentType, tag: str = "") -> Document:
        document = Document(user_id=_consumer_id(user), type=DocumentType(document_type).value, tag=tag)
        return document.bind(self).save()

    def new_hook(self, event_type: EventType, url: str) -> Hook:
        return Hook(event_type=EventType(event_type).value, url=url).bind(self)

    # ============ USERS ============

    def users(self, query: Optional[Mapping[str, Any]] = None) -> List[User]:
        return self.request_list(User, Operation.ALL_USERS, query=query)

    def user(self, user_id: str) -> User:
        return self.request_entity(User, Operation.FETCH_USER, {"Id": user_id})

    def natural_user(self, user_id: str) -> NaturalUser:
        return self.request_entity(NaturalUser, Operation.FETCH_NATURAL_USER, {"Id": user_id})

    def legal_user(self, user_id: str) -> LegalUser:
        return self.request_entity(LegalUser, Operation.FETCH_LEGAL_USER, {"Id": user_id})

    # ============ WALLETS ============

    def wallet(self, wallet_id: str) -> Wallet:
        return self.request_entity(Wallet, Operation.FETCH_WALLET, {"Id": wallet_id})

    def wallets(self, user: Any) -> List[Wallet]:
        return self.request_list(Wallet, Operation.FETCH_USER_WALLETS, {"Id": _consumer_id(user)})

    def wallet_transactions(self, wallet: Wallet, query: Optional[Mapping[str, Any]] = None) -> List[Transfer]:
        return self.request_list(
            Transfer, Operation.FETCH_WALLET_TRANSACTIONS, {"Id": _entity_id(wallet, "wallet")}, query=query
        )

    # ============ TRANSACTIONS ============

    def transfer(self, transfer_id: str) -> Transfer:
        return self.request_entity(Transfer, Operation.FETCH_TRANSFER, {"Id": transfer_id})

    def transfers(self, user: Any, query: Optional[Mapping[str, Any]] = None) -> List[Transfer]:
        return self.request_list(Transfer, Operation.FETCH_USER_TRANSFERS, {"Id": _consumer_id(user)}, query=query)

    def payin(self, payin_id: str) -> PayIn:
        return self.request_entity(PayIn, Operation.FETCH_PAYIN, {"Id": payin_id})

    def payout(self, payout_id: str) -> PayOut:
        return self.request_entity(PayOut, Operation.FETCH_PAYOUT, {"Id": payout_id})

    def refund(self, refund_id: str) -> Refund:
        return self.request_entity(Refund, Operation.FETCH_REFUND, {"Id": refund_id})

    # ============ CARDS & BANK ACCOUNTS ============

    def card(self, card_id: str) -> Card:
        return self.request_entity(Card, Operation.FETCH_CARD, {"Id": card_id})

    def cards(self, user: Any, query: Optional[Mapping[str, Any]] = None) -> List[Card]:
        return self.request_list(Card, Operation.FETCH_USER_CARDS, {"Id": _consumer_id(user)}, query=query)

    def bank_account(self, user: Any, account_id: str) -> BankAccount:
        return self.request_entity(
            BankAccount, Operation.FETCH_BANK_ACCOUNT, {"Id": account_id, "UserId": _consumer_id(user)}
        )

    def bank_accounts(self, user: Any, query: Optional[Mapping[str, Any]] = None) -> List[BankAccount]:
        return self.request_list(
            BankAccount, Operation.FETCH_USER_BANK_ACCOUNTS, {"Id": _consumer_id(user)}, query=query
        )

    def banking_alias(self, alias_id: str) -> BankingAlias:
        return self.request_entity(BankingAlias, Operation.FETCH_BANKING_ALIAS, {"Id": alias_id})

    def banking_aliases(self, wallet: Wallet) -> List[BankingAlias]:
        return self.request_list(
            BankingAlias, Operation.FETCH_BANKING_ALIASES, {"WalletId": _entity_id(wallet, "wallet")}
        )

    # ============ KYC ============

    def document(self, document_id: str) -> Document:
        return self.request_entity(Document, Operation.FETCH_KYC_DOCUMENT, {"Id": document_id})

    def documents(self, query: Optional[Mapping[str, Any]] = None) -> List[Document]:
        return self.request_list(Document, Operation.FETCH_ALL_KYC_DOCUMENTS, query=query)

    def user_documents(self, user: Any, query: Optional[Mapping[str, Any]] = None) -> List[Document]:
        return self.request_list(
            Document, Operation.FETCH_USER_KYC_DOCUMENTS, {"Id": _consumer_id(user)}, query=query
        )

    # ============ HOOKS & EVENTS ============

    def hook(self, hook_id: str) -> Hook:
        return self.request_entity(Hook, Operation.FETCH_HOOK, {"Id": hook_id})

    def hooks(self) -> List[Hook]:
        return self.request_list(Hook, Operation.FETCH_ALL_HOOKS)

    def hook_by_event_type(self, event_type: EventType) -> Hook:
        wanted = EventType(event_type).value
        for hook in self.hooks():
            if hook.event_type == wanted:
                return hook
        raise ValidationError(f"no hook found for event type {wanted}")

    def events(self, query: Optional[Mapping[str, Any]] = None) -> List[Event]:
        return self.request_list(Event, Operation.EVENTS, query=query)

    # ============ MANDATES ============

    def mandate(self, mandate_id: str) -> Mandate:
        return self.request_entity(Mandate, Operation.FETCH_MANDATE, {"Id": mandate_id})
