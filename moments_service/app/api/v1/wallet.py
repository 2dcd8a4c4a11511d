from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from ...dependencies import get_current_user_id
from ...services.query_service import QueryService, get_query_service
from ...services.wallet_service import WalletService, get_wallet_service
from ..schemas.users import CheckInResponse, WalletResponse


router = APIRouter(prefix="/wallet", tags=["wallet"])


@router.get("", summary="지갑 (크레딧, 뱃지, 체크인 상태)")
def get_wallet(
    user_id: Annotated[str, Depends(get_current_user_id)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> WalletResponse:
    return WalletResponse.from_domain(query.wallet(user_id))


@router.post("/check-in", summary="일일 체크인 (+3 크레딧, 24시간 쿨다운)")
def check_in(
    user_id: Annotated[str, Depends(get_current_user_id)],
    wallet: Annotated[WalletService, Depends(get_wallet_service)],
    query: Annotated[QueryService, Depends(get_query_service)],
) -> CheckInResponse:
    granted = wallet.check_in(user_id)
    user = query.get_user(user_id)
    return CheckInResponse(
        granted=granted,
        already_checked_in=(granted == 0),
        credits=user.credits,
    )
