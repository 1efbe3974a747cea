"""Bridge gateway routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from cherry_bridge import Action

from ..dependencies import Dependencies, get_deps

router = APIRouter(tags=["bridge"])


class BridgeInRequest(BaseModel):
    token: str = Field(min_length=1)
    origin_chain: str = Field(min_length=1)
    amount: int = Field(ge=0)


class BridgeOutRequest(BaseModel):
    token: str = Field(min_length=1)
    recipient: str = Field(min_length=1)
    agent: str = Field(min_length=1)
    amount: int = Field(ge=0)
    action: Action


class BridgeOutFromSelfRequest(BaseModel):
    token: str = Field(min_length=1)
    recipient: str = Field(min_length=1)
    amount: int = Field(ge=0)
    action: Action


class BridgeEventResponse(BaseModel):
    kind: str
    token: str
    recipient: str
    amount: str
    agent: str | None = None
    origin_chain: str | None = None


@router.post("/in", response_model=BridgeEventResponse)
async def bridge_in(request: BridgeInRequest, deps: Dependencies = Depends(get_deps)):
    """Record an inbound transfer."""
    with deps.host.transaction():
        event = deps.gateway.bridge_in(request.token, request.origin_chain, request.amount)
    return BridgeEventResponse(
        kind=event.name,
        token=event.token,
        recipient=event.recipient,
        origin_chain=event.origin_chain,
        amount=str(event.amount),
    )


@router.post("/out", response_model=BridgeEventResponse)
async def bridge_out(request: BridgeOutRequest, deps: Dependencies = Depends(get_deps)):
    """Deposit into or withdraw from a remote ledger."""
    with deps.host.transaction():
        event = deps.gateway.bridge_out(
            request.token,
            request.recipient,
            request.agent,
            request.amount,
            request.action,
        )
    return BridgeEventResponse(
        kind=event.name,
        token=event.token,
        recipient=event.recipient,
        agent=event.agent,
        amount=str(event.amount),
    )


@router.post("/out/self", response_model=BridgeEventResponse)
async def bridge_out_from_self(request: BridgeOutFromSelfRequest, deps: Dependencies = Depends(get_deps)):
    """Bridge out with the gateway as the acting agent."""
    with deps.host.transaction():
        event = deps.gateway.bridge_out_from_self(
            request.token,
            request.recipient,
            request.amount,
            request.action,
        )
    return BridgeEventResponse(
        kind=event.name,
        token=event.token,
        recipient=event.recipient,
        agent=event.agent,
        amount=str(event.amount),
    )
