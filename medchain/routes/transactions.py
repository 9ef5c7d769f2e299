"""
GET /v1/transactions/{signature} -- transaction lookup.

Simulated: any signature "exists" and reports as confirmed, with a
random slot. Use it to fill in the explorer panel on a report card.
"""

from fastapi import APIRouter

from medchain.ledger import solana
from medchain.models.schemas import TransactionDetails

router = APIRouter()


@router.get(
    "/v1/transactions/{signature}",
    response_model=TransactionDetails,
    summary="Get transaction details",
    tags=["Wallets"],
)
async def transaction_details(signature: str) -> TransactionDetails:
    return TransactionDetails(**await solana.get_transaction_details(signature))
