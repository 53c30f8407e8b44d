"""
SnapTrade broker integration using the snaptrade-python-sdk.
Read-only: accounts, positions and aggregated holdings for a user who has
already connected a brokerage. User registration and the connection portal
live in the dashboard, not here.

SDK calls are blocking, so each one runs in a worker thread.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Optional, Dict, List, Any

from loguru import logger
from snaptrade_client import SnapTrade

from hedgeboard.config import get_settings


ACCOUNT_TYPE_MAP = {
    'individual': 'individual',
    'joint': 'joint',
    'ira': 'ira',
    'roth_ira': 'roth_ira',
    'roth ira': 'roth_ira',
    '401k': '401k',
    '401(k)': '401k',
}


class SnapTradeError(Exception):
    """
    SnapTrade failure with a stable code the dashboard can branch on:
    INVALID_CREDENTIALS, RATE_LIMITED, BROKER_UNAVAILABLE or UNKNOWN_ERROR.
    """

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


def error_code_for_status(status: Optional[int]) -> str:
    if status in (401, 403):
        return 'INVALID_CREDENTIALS'
    if status == 429:
        return 'RATE_LIMITED'
    if status == 503:
        return 'BROKER_UNAVAILABLE'
    return 'UNKNOWN_ERROR'


def to_snaptrade_error(error: Exception) -> SnapTradeError:
    """Wrap an SDK exception, mapping its HTTP status to an error code."""
    if isinstance(error, SnapTradeError):
        return error
    status = getattr(error, 'status', None) or 500
    message = str(error) or 'Unknown SnapTrade error'
    body = getattr(error, 'body', None)
    return SnapTradeError(
        error_code_for_status(status),
        message,
        {'status': status, 'originalError': body if body is not None else repr(error)},
    )


def map_account_type(account_type: Optional[str]) -> str:
    return ACCOUNT_TYPE_MAP.get((account_type or '').lower(), 'other')


@dataclass
class Position:
    symbol: str
    description: str
    units: float
    price: float
    market_value: float
    currency: str
    average_purchase_price: Optional[float] = None


@dataclass
class Account:
    id: str
    name: str
    number: str
    type: str
    currency: str
    balance: float
    holdings: List[Position] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'number': self.number,
            'type': self.type,
            'currency': self.currency,
            'balance': self.balance,
            'holdingsCount': len(self.holdings),
        }


def position_to_holding(position: Position) -> Dict[str, Any]:
    return {
        'ticker': position.symbol,
        'shares': position.units,
        'currentValue': position.market_value,
        'averagePrice': position.average_purchase_price,
        'currency': position.currency,
    }


def aggregate_holdings(positions: List[Position]) -> List[Dict[str, Any]]:
    """
    Combine positions in the same ticker across accounts. The average price
    is share-weighted when both sides have one, otherwise whichever exists.
    """
    holdings: Dict[str, Dict[str, Any]] = {}

    for pos in positions:
        if not pos.symbol:
            logger.debug("Skipping position with no ticker")
            continue

        existing = holdings.get(pos.symbol)
        if existing is None:
            holdings[pos.symbol] = position_to_holding(pos)
            continue

        total_units = existing['shares'] + pos.units
        if existing['averagePrice'] and pos.average_purchase_price and total_units:
            average = (
                existing['shares'] * existing['averagePrice']
                + pos.units * pos.average_purchase_price
            ) / total_units
        else:
            average = existing['averagePrice'] or pos.average_purchase_price

        existing['shares'] = total_units
        existing['currentValue'] = (existing['currentValue'] or 0) + pos.market_value
        existing['averagePrice'] = average

    logger.info(f"Aggregated {len(positions)} positions into {len(holdings)} holdings")
    return list(holdings.values())


class SnapTradeService:
    """
    Service for reading SnapTrade-connected brokerage accounts.
    App credentials come from settings; user id/secret are passed per call.
    """

    def __init__(self, client: Optional[SnapTrade] = None):
        self.settings = get_settings()
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.SNAPTRADE_CLIENT_ID and self.settings.SNAPTRADE_CONSUMER_KEY)

    def _get_client(self) -> SnapTrade:
        if self._client is None:
            if not self.is_configured:
                raise SnapTradeError(
                    'INVALID_CREDENTIALS',
                    'SnapTrade credentials not configured. Set SNAPTRADE_CLIENT_ID '
                    'and SNAPTRADE_CONSUMER_KEY environment variables.',
                )
            self._client = SnapTrade(
                consumer_key=self.settings.SNAPTRADE_CONSUMER_KEY,
                client_id=self.settings.SNAPTRADE_CLIENT_ID,
            )
        return self._client

    async def _call(self, fn, **kwargs) -> Any:
        try:
            response = await asyncio.to_thread(fn, **kwargs)
        except Exception as e:
            logger.error(f"SnapTrade error: {e}")
            raise to_snaptrade_error(e) from e
        return response.body or []

    # -------------------------------------------------------------------------
    # ACCOUNTS & POSITIONS
    # -------------------------------------------------------------------------

    async def get_accounts(self, user_id: str, user_secret: str) -> List[Account]:
        client = self._get_client()
        data = await self._call(
            client.account_information.list_user_accounts,
            user_id=user_id,
            user_secret=user_secret,
        )
        logger.info(f"SnapTrade: fetched {len(data)} accounts")

        accounts = []
        for acc in data:
            meta = acc.get('meta') or {}
            currency = acc.get('currency') or {}
            accounts.append(Account(
                id=str(acc.get('id') or ''),
                name=str(acc.get('name') or 'Account'),
                number=str(acc.get('number') or ''),
                type=map_account_type(meta.get('type')),
                currency=str(currency.get('code') or 'USD'),
                balance=float(acc.get('cash') or 0),
            ))
        return accounts

    @staticmethod
    def _parse_position(pos: Dict[str, Any]) -> Position:
        symbol = pos.get('symbol') or {}
        # Newer API versions nest the universal symbol one level deeper
        if isinstance(symbol, dict) and isinstance(symbol.get('symbol'), dict):
            symbol = symbol['symbol']

        if isinstance(symbol, str):
            ticker, description, currency = symbol, symbol, 'USD'
        else:
            ticker = symbol.get('symbol') or symbol.get('raw_symbol') or 'UNKNOWN'
            description = symbol.get('description') or ticker
            currency = (symbol.get('currency') or {}).get('code') or 'USD'

        units = float(pos.get('units') or 0) + float(pos.get('fractional_units') or 0)
        price = float(pos.get('price') or 0)
        average = pos.get('average_purchase_price')

        return Position(
            symbol=str(ticker),
            description=str(description),
            units=units,
            price=price,
            market_value=units * price,
            currency=str(currency),
            average_purchase_price=float(average) if average else None,
        )

    async def get_account_holdings(self, user_id: str, user_secret: str, account_id: str) -> List[Position]:
        client = self._get_client()
        data = await self._call(
            client.account_information.get_user_account_positions,
            user_id=user_id,
            user_secret=user_secret,
            account_id=account_id,
        )
        positions = [self._parse_position(p) for p in data]
        logger.info(f"SnapTrade: {len(positions)} positions in account {account_id}")
        return positions

    async def get_all_holdings(self, user_id: str, user_secret: str) -> Dict[str, Any]:
        """
        Holdings across every account, aggregated by ticker. An account whose
        positions cannot be fetched is logged and counted as empty.
        """
        accounts = await self.get_accounts(user_id, user_secret)

        async def load(account: Account) -> List[Position]:
            try:
                account.holdings = await self.get_account_holdings(user_id, user_secret, account.id)
            except SnapTradeError as e:
                logger.error(f"Failed to fetch holdings for account {account.id}: {e}")
                account.holdings = []
            return account.holdings

        per_account = await asyncio.gather(*(load(a) for a in accounts))
        positions = [p for group in per_account for p in group]

        return {
            'holdings': aggregate_holdings(positions),
            'accounts': accounts,
        }

    async def refresh_holdings(self, user_id: str, user_secret: str, account_id: Optional[str] = None) -> None:
        """Re-request positions so SnapTrade syncs with the brokerage."""
        client = self._get_client()
        if account_id:
            account_ids = [account_id]
        else:
            account_ids = [a.id for a in await self.get_accounts(user_id, user_secret)]

        await asyncio.gather(*(
            self._call(
                client.account_information.get_user_account_positions,
                user_id=user_id,
                user_secret=user_secret,
                account_id=acc_id,
            )
            for acc_id in account_ids
        ))


# =============================================================================
# SINGLETON INSTANCE
# =============================================================================

_snaptrade_service: Optional[SnapTradeService] = None


def get_snaptrade_service() -> SnapTradeService:
    """Get the global SnapTrade service instance."""
    global _snaptrade_service
    if _snaptrade_service is None:
        _snaptrade_service = SnapTradeService()
    return _snaptrade_service
