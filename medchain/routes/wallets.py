"""
Wallet endpoints -- role lookup, balances, airdrops and transfers.

Role lookup is string matching against demo wallets (there is no
wallet-signature login). Transfers are always simulated; balance and
airdrop only reach a real RPC node when SOLANA_RPC_URL is configured.
"""

from fastapi import APIRouter

from medchain.ledger import solana
from medchain.ledger.roles import DEMO_WALLETS, get_user_role
from medchain.models.schemas import (
    AirdropRequest,
    BalanceResponse,
    DemoWallet,
    RoleResponse,
    SignatureResponse,
    TransferRequest,
)

router = APIRouter()


@router.get(
    "/v1/wallets/demo",
    response_model=list[DemoWallet],
    summary="List demo wallets",
    description="Wallets the login screen offers for switching between doctor and patient views.",
    tags=["Wallets"],
)
async def demo_wallets() -> list[DemoWallet]:
    return [DemoWallet(**w) for w in DEMO_WALLETS]


@router.get(
    "/v1/wallets/{address}/role",
    response_model=RoleResponse,
    summary="Resolve a wallet's role",
    description="Decides whether the wallet gets the doctor or the patient dashboard.",
    tags=["Wallets"],
)
async def wallet_role(address: str) -> RoleResponse:
    return RoleResponse(address=address, role=get_user_role(address))


@router.get(
    "/v1/wallets/{address}/balance",
    response_model=BalanceResponse,
    summary="Get SOL balance",
    tags=["Wallets"],
)
async def wallet_balance(address: str) -> BalanceResponse:
    balance = await solana.get_wallet_balance(address)
    return BalanceResponse(address=address, balance_sol=balance, network=solana.SOLANA_NETWORK)


@router.post(
    "/v1/wallets/{address}/airdrop",
    response_model=SignatureResponse,
    summary="Request a devnet airdrop",
    description="Returns 429 when the faucet rate limit is hit.",
    tags=["Wallets"],
)
async def airdrop(address: str, request: AirdropRequest | None = None) -> SignatureResponse:
    amount = request.amount if request else 1
    signature = await solana.request_devnet_airdrop(address, amount)
    return SignatureResponse(signature=signature, explorer=solana.explorer_url(signature))


@router.post(
    "/v1/wallets/transfer",
    response_model=SignatureResponse,
    summary="Transfer SOL (simulated)",
    tags=["Wallets"],
)
async def transfer(request: TransferRequest) -> SignatureResponse:
    signature = await solana.transfer_sol(request.from_wallet, request.to_wallet, request.amount)
    return SignatureResponse(signature=signature, explorer=solana.explorer_url(signature))
