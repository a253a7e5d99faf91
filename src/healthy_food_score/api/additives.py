"""Additive rule endpoints; writes need the admin token."""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from healthy_food_score.api.models import AdditiveRuleIn, AdditiveRuleUpdate

if TYPE_CHECKING:
    from healthy_food_score.containers import AppContainer

router = APIRouter(prefix="/additives", tags=["additives"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("")
async def list_additives(request: Request) -> list[dict[str, object]]:
    """Return every additive rule ordered by name."""
    container: AppContainer = request.app.state.container
    rules = await container.additive_rule_service.list_rules()
    return [asdict(rule) for rule in rules]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
async def create_additive(
    payload: AdditiveRuleIn, request: Request
) -> dict[str, object]:
    """Create an additive rule."""
    container: AppContainer = request.app.state.container
    try:
        rule = container.additive_rule_service.create_rule(payload.to_domain())
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    return asdict(rule)


@router.patch("/{name}", dependencies=[Depends(require_admin)])
async def update_additive(
    name: str, payload: AdditiveRuleUpdate, request: Request
) -> dict[str, object]:
    """Update category, weight and regex of a rule."""
    container: AppContainer = request.app.state.container
    try:
        rule = container.additive_rule_service.update_rule(
            name, payload.category, payload.weight, payload.regex
        )
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
        ) from exc
    if rule is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return asdict(rule)


@router.delete("/{name}", dependencies=[Depends(require_admin)])
async def delete_additive(name: str, request: Request) -> dict[str, bool]:
    """Delete a rule by name."""
    container: AppContainer = request.app.state.container
    container.additive_rule_service.delete_rule(name)
    return {"success": True}
