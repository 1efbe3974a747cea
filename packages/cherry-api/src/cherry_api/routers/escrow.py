"""Escrow ledger routes: initialization, deposits, withdrawals, lookups."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from ..auth import get_caller
from ..dependencies import Dependencies, get_deps

router = APIRouter(tags=["escrow"])


class InitializeRequest(BaseModel):
    token: str = Field(min_length=1)
    initial_value: int = Field(ge=0)


class MovementRequest(BaseModel):
    token: str = Field(min_length=1)
    amount: int = Field(ge=0)
    agent: str = Field(min_length=1)


class AllowanceResponse(BaseModel):
    token: str
    allowance: Optional[str] = None


class RecordResponse(BaseModel):
    token: str
    agent: str
    balance: Optional[str] = None


def _fmt(value: Optional[int]) -> Optional[str]:
    return str(value) if value is not None else None


@router.post("/tokens", response_model=AllowanceResponse, status_code=status.HTTP_201_CREATED)
async def initialize_token(
    request: InitializeRequest,
    deps: Dependencies = Depends(get_deps),
):
    """Seed the allowance for a token."""
    with deps.host.transaction():
        deps.ledger.initialize(request.token, request.initial_value)
    return AllowanceResponse(token=request.token, allowance=_fmt(deps.ledger.get_allowance(request.token)))


@router.get("/tokens/{token}", response_model=AllowanceResponse)
async def get_allowance(token: str, deps: Dependencies = Depends(get_deps)):
    return AllowanceResponse(token=token, allowance=_fmt(deps.ledger.get_allowance(token)))


@router.get("/tokens/{token}/deposits/{agent}", response_model=RecordResponse)
async def get_deposit(token: str, agent: str, deps: Dependencies = Depends(get_deps)):
    return RecordResponse(token=token, agent=agent, balance=_fmt(deps.ledger.get_deposit(token, agent)))


@router.get("/tokens/{token}/withdrawals/{agent}", response_model=RecordResponse)
async def get_withdrawal(token: str, agent: str, deps: Dependencies = Depends(get_deps)):
    return RecordResponse(token=token, agent=agent, balance=_fmt(deps.ledger.get_withdraw(token, agent)))


@router.post("/deposit", response_model=AllowanceResponse)
async def deposit(
    request: MovementRequest,
    deps: Dependencies = Depends(get_deps),
    caller: Optional[str] = Depends(get_caller),
):
    """Deposit directly into the local ledger as the API key's caller."""
    with deps.host.transaction():
        deps.ledger.deposit(request.token, request.amount, request.agent, caller=caller)
    return AllowanceResponse(token=request.token, allowance=_fmt(deps.ledger.get_allowance(request.token)))


@router.post("/withdraw", response_model=AllowanceResponse)
async def withdraw(
    request: MovementRequest,
    deps: Dependencies = Depends(get_deps),
    caller: Optional[str] = Depends(get_caller),
):
    with deps.host.transaction():
        deps.ledger.withdraw(request.token, request.amount, request.agent, caller=caller)
    return AllowanceResponse(token=request.token, allowance=_fmt(deps.ledger.get_allowance(request.token)))
