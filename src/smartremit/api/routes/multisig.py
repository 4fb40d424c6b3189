"""Treasury multisig endpoints."""

from fastapi import APIRouter, Depends

from smartremit.api.contracts import MultisigApprovalRequest, MultisigWithdrawRequest
from smartremit.api.dependencies import Services, get_services

router = APIRouter(prefix="/api/multisig")


@router.get("/state")
async def get_state(services: Services = Depends(get_services)):
    """Get treasury balance, signers and requests."""
    state = await services.reconciler.fetch_multisig_state()
    return {"success": True, "data": state.to_dict()}


@router.post("/withdraw")
async def propose_withdraw(
    request: MultisigWithdrawRequest, services: Services = Depends(get_services)
):
    """Propose a treasury withdrawal and return the refreshed state."""
    result = await services.orchestrator.submit_multisig_withdraw(
        request.initiator, request.to, request.amount
    )
    state = await services.reconciler.fetch_multisig_state()
    return {"success": True, "data": {"result": result.to_dict(), "state": state.to_dict()}}


@router.post("/approve")
async def approve_withdraw(
    request: MultisigApprovalRequest, services: Services = Depends(get_services)
):
    """Approve a treasury withdrawal and return the refreshed state."""
    result = await services.orchestrator.submit_multisig_approval(
        request.signer, request.request_id
    )
    state = await services.reconciler.fetch_multisig_state()
    return {"success": True, "data": {"result": result.to_dict(), "state": state.to_dict()}}
