"""Forex balance, quote and swap endpoints."""

from fastapi import APIRouter, Depends

from smartremit.api.contracts import ForexQuoteRequest, ForexSwapRequest
from smartremit.api.dependencies import Services, get_services

router = APIRouter(prefix="/api/forex")


@router.get("/balances")
async def get_forex_balances(services: Services = Depends(get_services)):
    """Get balances of the New York (USDC) and London (EURC) accounts."""
    balances = await services.reconciler.fetch_forex_balances()
    return {"success": True, "data": balances.to_dict()}


@router.post("/quote")
async def get_quote(request: ForexQuoteRequest, services: Services = Depends(get_services)):
    """Get a quote for a forex swap."""
    summary = await services.forex.request_quote(request.direction, request.amount)
    return {"success": True, "data": summary.to_dict()}


@router.post("/swap")
async def swap(request: ForexSwapRequest, services: Services = Depends(get_services)):
    """Execute a previously returned quote."""
    result = await services.forex.submit_swap(request.quote)
    return {"success": True, "data": result.to_dict()}
