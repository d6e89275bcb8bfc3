# -*- coding: utf-8 -*-
"""CLI commands for browsing lessons and managing local lesson state."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

import typer

from sambalessons.app_context import AppContext, build_app_context
from sambalessons.config import load_config
from sambalessons.constants import LEVELS
from sambalessons.core.lesson_adapter import LessonListAdapter
from sambalessons.models.display_state import LessonDisplayState

app = typer.Typer(help="Browse dance lessons and manage favorites")
logger = logging.getLogger(__name__)

# Replaced in tests to inject fakes
context_factory: Callable[[dict[str, Any]], AppContext] = build_app_context


def _open_context(settings_path: Path | None) -> AppContext:
    settings = load_config(settings_path)
    return context_factory(settings)


def _load_level(ctx: AppContext, level: str) -> LessonListAdapter:
    try:
        adapter = ctx.adapter_for(level, notify=typer.echo)
    except ValueError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc
    ctx.cache.fetch_failed = lambda lvl, message: typer.echo(f"{lvl}: {message}", err=True)
    adapter.attach(refresh=True)
    ctx.cache.wait_for_all(timeout=30.0)
    return adapter


def _format_row(state: LessonDisplayState, created: bool = False) -> str:
    heart = "♥" if state.is_favorite else "♡"
    if not state.favorite_enabled:
        heart = "✕"
    watched = "✓" if state.is_watched else " "
    item = state.item
    mine = "*" if created else " "
    return f"[{watched}] {heart}{mine} {item.id}  {item.scheduled_time:<8} {item.title} - {item.subtitle}"


@app.command()
def lessons(
    level: str = typer.Argument(..., help=f"Lesson level: {', '.join(LEVELS)}"),
    settings: Path = typer.Option(None, help="Path to settings.json"),
) -> None:
    """List the lessons of one level with local favorite and watched flags."""
    ctx = _open_context(settings)
    try:
        adapter = _load_level(ctx, level)
        states = adapter.display_states()
        typer.echo(f"{len(states)} lessons in {adapter.level}")
        for state in states:
            typer.echo(_format_row(state, ctx.preferences.is_created(state.lesson_id)))
    finally:
        ctx.close()


@app.command()
def favorite(
    lesson_id: str = typer.Argument(..., help="Lesson id"),
    level: str = typer.Option(..., help="Level the lesson belongs to"),
    settings: Path = typer.Option(None, help="Path to settings.json"),
) -> None:
    """Toggle a lesson's favorite flag (on this device when signed out)."""
    ctx = _open_context(settings)
    try:
        adapter = _load_level(ctx, level)
        try:
            now_favorite = adapter.toggle_favorite(lesson_id)
        except KeyError as exc:
            typer.echo(str(exc), err=True)
            raise typer.Exit(code=1)
        typer.echo(f"{lesson_id}: {'favorite' if now_favorite else 'not favorite'}")
    finally:
        ctx.close()


@app.command()
def watched(
    lesson_id: str = typer.Argument(..., help="Lesson id"),
    off: bool = typer.Option(False, "--off", help="Mark as not watched"),
    settings: Path = typer.Option(None, help="Path to settings.json"),
) -> None:
    """Mark a lesson as watched on this device."""
    ctx = _open_context(settings)
    try:
        ctx.preferences.set_watched(lesson_id, not off)
        typer.echo(f"{lesson_id}: {'not watched' if off else 'watched'}")
    finally:
        ctx.close()


@app.command()
def login(
    email: str = typer.Argument(..., help="Account email"),
    password: str = typer.Option(..., prompt=True, hide_input=True),
    settings: Path = typer.Option(None, help="Path to settings.json"),
) -> None:
    """Sign in and cache the remote profile."""
    ctx = _open_context(settings)
    try:
        if not ctx.session.sign_in(email, password):
            typer.echo("Login failed", err=True)
            raise typer.Exit(code=1)
        ctx.session.sync_from_remote(ctx.catalog)
        typer.echo(f"Signed in as {ctx.session.name} ({ctx.session.role or 'no role'})")
    finally:
        ctx.close()


@app.command()
def logout(settings: Path = typer.Option(None, help="Path to settings.json")) -> None:
    """Forget the signed-in user."""
    ctx = _open_context(settings)
    try:
        ctx.session.sign_out()
        typer.echo("Signed out")
    finally:
        ctx.close()


@app.command()
def whoami(settings: Path = typer.Option(None, help="Path to settings.json")) -> None:
    """Show the cached identity."""
    ctx = _open_context(settings)
    try:
        if not ctx.session.has_session():
            typer.echo("Not signed in")
            return
        role = "instructor" if ctx.session.is_privileged() else (ctx.session.role or "member")
        typer.echo(f"{ctx.session.name} <{ctx.session.email}> uid={ctx.session.get_uid()} role={role}")
    finally:
        ctx.close()


@app.command()
def saved(settings: Path = typer.Option(None, help="Path to settings.json")) -> None:
    """Show the lesson ids kept in local preferences."""
    ctx = _open_context(settings)
    try:
        if ctx.session.has_session():
            favorites = ctx.preferences.get_user_favorites(ctx.session.get_uid())
        else:
            favorites = ctx.preferences.get_favorites()
        typer.echo(f"favorites: {', '.join(sorted(favorites)) or '-'}")
        typer.echo(f"created:   {', '.join(sorted(ctx.preferences.get_created())) or '-'}")
        typer.echo(f"watched:   {', '.join(sorted(ctx.preferences.get_watched())) or '-'}")
    finally:
        ctx.close()
