"""
MangoPay Action Registry
Single table mapping every remote operation to its HTTP method, path template
and required path parameters

Path templates use {{Name}} placeholders that are filled from the request
payload. Adding an endpoint means adding one Operation member and one ROUTES
entry; check_registry() runs at import and refuses an inconsistent table.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Mapping, Optional
from urllib.parse import quote

from mangoclient.exceptions import MissingParameterError, ProgrammingError, UnknownOperationError

logger = logging.getLogger(__name__)

PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")
HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})


class Operation(Enum):
    EVENTS = "events"

    # Users
    ALL_USERS = "all_users"
    FETCH_USER = "fetch_user"
    CREATE_NATURAL_USER = "create_natural_user"
    EDIT_NATURAL_USER = "edit_natural_user"
    FETCH_NATURAL_USER = "fetch_natural_user"
    CREATE_LEGAL_USER = "create_legal_user"
    EDIT_LEGAL_USER = "edit_legal_user"
    FETCH_LEGAL_USER = "fetch_legal_user"
    FETCH_USER_WALLETS = "fetch_user_wallets"
    FETCH_USER_TRANSFERS = "fetch_user_transfers"
    FETCH_USER_CARDS = "fetch_user_cards"
    FETCH_USER_BANK_ACCOUNTS = "fetch_user_bank_accounts"
    FETCH_USER_KYC_DOCUMENTS = "fetch_user_kyc_documents"

    # Wallets
    CREATE_WALLET = "create_wallet"
    EDIT_WALLET = "edit_wallet"
    FETCH_WALLET = "fetch_wallet"
    FETCH_WALLET_TRANSACTIONS = "fetch_wallet_transactions"

    # Transfers
    CREATE_TRANSFER = "create_transfer"
    FETCH_TRANSFER = "fetch_transfer"
    CREATE_TRANSFER_REFUND = "create_transfer_refund"

    # Pay-ins
    CREATE_WEB_PAYIN = "create_web_payin"
    CREATE_DIRECT_PAYIN = "create_direct_payin"
    CREATE_BANKWIRE_DIRECT_PAYIN = "create_bankwire_direct_payin"
    CREATE_DIRECT_DEBIT_WEB_PAYIN = "create_direct_debit_web_payin"
    FETCH_PAYIN = "fetch_payin"
    CREATE_PAYIN_REFUND = "create_payin_refund"

    # Pay-outs
    CREATE_PAYOUT = "create_payout"
    FETCH_PAYOUT = "fetch_payout"

    # Refunds
    FETCH_REFUND = "fetch_refund"

    # Cards
    CREATE_CARD_REGISTRATION = "create_card_registration"
    SEND_CARD_REGISTRATION_DATA = "send_card_registration_data"
    FETCH_CARD = "fetch_card"
    DEACTIVATE_CARD = "deactivate_card"

    # Bank accounts
    CREATE_BANK_ACCOUNT = "create_bank_account"
    FETCH_BANK_ACCOUNT = "fetch_bank_account"

    # Banking aliases
    CREATE_BANKING_ALIAS = "create_banking_alias"
    FETCH_BANKING_ALIAS = "fetch_banking_alias"
    FETCH_BANKING_ALIASES = "fetch_banking_aliases"

    # KYC
    CREATE_KYC_DOCUMENT = "create_kyc_document"
    SUBMIT_KYC_DOCUMENT = "submit_kyc_document"
    CREATE_KYC_PAGE = "create_kyc_page"
    FETCH_KYC_DOCUMENT = "fetch_kyc_document"
    FETCH_ALL_KYC_DOCUMENTS = "fetch_all_kyc_documents"

    # Hooks
    CREATE_HOOK = "create_hook"
    UPDATE_HOOK = "update_hook"
    FETCH_HOOK = "fetch_hook"
    FETCH_ALL_HOOKS = "fetch_all_hooks"

    # Mandates
    FETCH_MANDATE = "fetch_mandate"


@dataclass(frozen=True)
class Route:
    method: str
    path: str
    params: FrozenSet[str] = frozenset()

    def placeholders(self) -> FrozenSet[str]:
        return frozenset(PLACEHOLDER.findall(self.path))


def _route(method: str, path: str, *params: str) -> Route:
    return Route(method, path, frozenset(params))


ROUTES: Dict[Operation, Route] = {
    Operation.EVENTS: _route("GET", "/events"),

    Operation.ALL_USERS: _route("GET", "/users"),
    Operation.FETCH_USER: _route("GET", "/users/{{Id}}", "Id"),
    Operation.CREATE_NATURAL_USER: _route("POST", "/users/natural"),
    Operation.EDIT_NATURAL_USER: _route("PUT", "/users/natural/{{Id}}", "Id"),
    Operation.FETCH_NATURAL_USER: _route("GET", "/users/natural/{{Id}}", "Id"),
    Operation.CREATE_LEGAL_USER: _route("POST", "/users/legal"),
    Operation.EDIT_LEGAL_USER: _route("PUT", "/users/legal/{{Id}}", "Id"),
    Operation.FETCH_LEGAL_USER: _route("GET", "/users/legal/{{Id}}", "Id"),
    Operation.FETCH_USER_WALLETS: _route("GET", "/users/{{Id}}/wallets", "Id"),
    Operation.FETCH_USER_TRANSFERS: _route("GET", "/users/{{Id}}/transactions", "Id"),
    Operation.FETCH_USER_CARDS: _route("GET", "/users/{{Id}}/cards", "Id"),
    Operation.FETCH_USER_BANK_ACCOUNTS: _route("GET", "/users/{{Id}}/bankaccounts", "Id"),
    Operation.FETCH_USER_KYC_DOCUMENTS: _route("GET", "/users/{{Id}}/KYC/documents", "Id"),

    Operation.CREATE_WALLET: _route("POST", "/wallets"),
    Operation.EDIT_WALLET: _route("PUT", "/wallets/{{Id}}", "Id"),
    Operation.FETCH_WALLET: _route("GET", "/wallets/{{Id}}", "Id"),
    Operation.FETCH_WALLET_TRANSACTIONS: _route("GET", "/wallets/{{Id}}/transactions", "Id"),

    Operation.CREATE_TRANSFER: _route("POST", "/transfers"),
    Operation.FETCH_TRANSFER: _route("GET", "/transfers/{{Id}}", "Id"),
    Operation.CREATE_TRANSFER_REFUND: _route("POST", "/transfers/{{TransferId}}/refunds", "TransferId"),

    Operation.CREATE_WEB_PAYIN: _route("POST", "/payins/card/web"),
    Operation.CREATE_DIRECT_PAYIN: _route("POST", "/payins/card/direct"),
    Operation.CREATE_BANKWIRE_DIRECT_PAYIN: _route("POST", "/payins/bankwire/direct"),
    Operation.CREATE_DIRECT_DEBIT_WEB_PAYIN: _route("POST", "/payins/directdebit/web"),
    Operation.FETCH_PAYIN: _route("GET", "/payins/{{Id}}", "Id"),
    Operation.CREATE_PAYIN_REFUND: _route("POST", "/payins/{{PayInId}}/refunds", "PayInId"),

    Operation.CREATE_PAYOUT: _route("POST", "/payouts/bankwire"),
    Operation.FETCH_PAYOUT: _route("GET", "/payouts/{{Id}}", "Id"),

    Operation.FETCH_REFUND: _route("GET", "/refunds/{{Id}}", "Id"),

    Operation.CREATE_CARD_REGISTRATION: _route("POST", "/cardregistrations"),
    Operation.SEND_CARD_REGISTRATION_DATA: _route("PUT", "/cardregistrations/{{Id}}", "Id"),
    Operation.FETCH_CARD: _route("GET", "/cards/{{Id}}", "Id"),
    Operation.DEACTIVATE_CARD: _route("PUT", "/cards/{{Id}}", "Id"),

    Operation.CREATE_BANK_ACCOUNT: _route("POST", "/users/{{UserId}}/bankaccounts/{{AccountType}}", "UserId", "AccountType"),
    Operation.FETCH_BANK_ACCOUNT: _route("GET", "/users/{{UserId}}/bankaccounts/{{Id}}", "UserId", "Id"),

    Operation.CREATE_BANKING_ALIAS: _route("POST", "/wallets/{{WalletId}}/bankingaliases/iban", "WalletId"),
    Operation.FETCH_BANKING_ALIAS: _route("GET", "/bankingaliases/{{Id}}", "Id"),
    Operation.FETCH_BANKING_ALIASES: _route("GET", "/wallets/{{WalletId}}/bankingaliases", "WalletId"),

    Operation.CREATE_KYC_DOCUMENT: _route("POST", "/users/{{UserId}}/KYC/documents", "UserId"),
    Operation.SUBMIT_KYC_DOCUMENT: _route("PUT", "/users/{{UserId}}/KYC/documents/{{Id}}", "UserId", "Id"),
    Operation.CREATE_KYC_PAGE: _route("POST", "/users/{{UserId}}/KYC/documents/{{Id}}/pages", "UserId", "Id"),
    Operation.FETCH_KYC_DOCUMENT: _route("GET", "/KYC/documents/{{Id}}", "Id"),
    Operation.FETCH_ALL_KYC_DOCUMENTS: _route("GET", "/KYC/documents"),

    Operation.CREATE_HOOK: _route("POST", "/hooks"),
    Operation.UPDATE_HOOK: _route("PUT", "/hooks/{{Id}}", "Id"),
    Operation.FETCH_HOOK: _route("GET", "/hooks/{{Id}}", "Id"),
    Operation.FETCH_ALL_HOOKS: _route("GET", "/hooks"),

    Operation.FETCH_MANDATE: _route("GET", "/mandates/{{Id}}", "Id"),
}


def check_registry(routes: Optional[Mapping[Operation, Route]] = None) -> None:
    """Raise ProgrammingError if an operation lacks a route or a route is inconsistent"""
    routes = ROUTES if routes is None else routes
    missing = [op.name for op in Operation if op not in routes]
    if missing:
        raise ProgrammingError(f"operations without a route: {', '.join(missing)}")
    for operation, route in routes.items():
        if route.method not in HTTP_METHODS:
            raise ProgrammingError(f"{operation.name}: unsupported HTTP method {route.method}")
        placeholders = route.placeholders()
        if placeholders != route.params:
            raise ProgrammingError(
                f"{operation.name}: path placeholders {sorted(placeholders)} "
                f"do not match required parameters {sorted(route.params)}"
            )
    logger.debug(f"Action registry verified: {len(routes)} routes")


def resolve_route(operation: Any) -> Route:
    try:
        return ROUTES[operation]
    except (KeyError, TypeError):
        raise UnknownOperationError(operation) from None


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


def render_path(operation: Operation, route: Route, payload: Optional[Mapping[str, Any]]) -> str:
    """Substitute every placeholder; a missing or empty value is a MissingParameterError"""
    payload = payload or {}
    for name in sorted(route.params):
        if _is_empty(payload.get(name)):
            raise MissingParameterError(name, operation)

    # each value is one path segment
    return PLACEHOLDER.sub(lambda match: quote(str(payload[match.group(1)]), safe=""), route.path)


check_registry()
