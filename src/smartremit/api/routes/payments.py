"""Balance, transfer and admin withdrawal endpoints."""

from fastapi import APIRouter, Depends

from smartremit.api.contracts import AdminWithdrawRequest, TransferRequest
from smartremit.api.dependencies import Services, get_services, require_admin_auth

router = APIRouter(prefix="/api")


@router.get("/balances")
async def get_balances(services: Services = Depends(get_services)):
    """Get USDC balances of all smart accounts."""
    balances = await services.reconciler.fetch_balances()
    return {"success": True, "data": {"balances": balances}}


@router.post("/transfer")
async def transfer(request: TransferRequest, services: Services = Depends(get_services)):
    """Transfer between smart accounts."""
    result = await services.orchestrator.submit_transfer(request.from_, request.to, request.amount)
    return {"success": True, "data": result.to_dict()}


@router.post("/admin/withdraw")
async def admin_withdraw(
    request: AdminWithdrawRequest,
    services: Services = Depends(get_services),
    _: bool = Depends(require_admin_auth),
):
    """Withdraw from a smart account (admin token required)."""
    result = await services.orchestrator.submit_admin_withdraw(request.from_, request.amount)
    return {"success": True, "data": result.to_dict()}
