"""Shared CLI options: acting identity and result handling."""

from __future__ import annotations

import functools
from typing import Callable, TypeVar

import click

from storefront.application.result import Result
from storefront.domain.exceptions import DomainException
from storefront.domain.model.value_objects import OwnerKey

T = TypeVar("T")


def owner_options(command: Callable) -> Callable:
    """Add --user/--guest/--admin and pass the resolved ``owner`` keyword."""

    @click.option("--user", "user_id", default=None, help="Signed-in user id.")
    @click.option("--guest", "guest_session_id", default=None, help="Guest session token.")
    @click.option("--admin", is_flag=True, default=False, help="Act with admin rights (with --user).")
    @functools.wraps(command)
    def wrapper(user_id: str | None, guest_session_id: str | None, admin: bool, **kwargs):
        kwargs["owner"] = resolve_owner(user_id, guest_session_id, admin)
        return command(**kwargs)

    return wrapper


def resolve_owner(user_id: str | None, guest_session_id: str | None, admin: bool) -> OwnerKey:
    if admin and not user_id:
        raise click.UsageError("--admin requires --user")
    try:
        return OwnerKey(user_id=user_id, guest_session_id=guest_session_id, is_admin=admin)
    except DomainException as exc:
        raise click.UsageError("Pass exactly one of --user or --guest") from exc


def unwrap(result: Result[T]) -> T:
    """Turn a failed Result into a ClickException (exit code 1)."""
    if not result.ok:
        raise click.ClickException(f"{result.message} [{result.kind}]")
    return result.value  # type: ignore[return-value]
