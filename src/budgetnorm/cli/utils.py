"""Shared CLI helpers."""

import asyncio
import functools
from collections.abc import Callable, Coroutine
from typing import Any, NoReturn, TypeVar

import structlog
import typer
from rich.console import Console
from rich.markup import escape

T = TypeVar("T")

logger = structlog.get_logger(__name__)
console = Console()


def async_command(func: Callable[..., Coroutine[Any, Any, T]]) -> Callable[..., T]:
    """Run an async typer command on a fresh event loop."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def handle_cli_error(error: Exception, context: dict[str, Any] | None = None) -> NoReturn:
    """Log an error, print it for the user and exit with status 1."""
    logger.error("Command failed", error=str(error), **(context or {}))
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise typer.Exit(code=1)
