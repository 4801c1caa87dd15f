from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from linewrap.cancellation import CancellationToken, cancellation_scope
from linewrap.config import (
    WrappingConfig,
    server_defaults,
    server_timeout_ms,
    wrapping_defaults,
)
from linewrap.document import Document
from linewrap.exceptions import OperationCancelled
from linewrap.schema import CandidateActionDTO
from linewrap.wrapping.history import UsageHistoryStore
from linewrap.wrapping.model import CandidateAction
from linewrap.wrapping.ranking import rank_actions
from linewrap.wrapping.service import build_service

app = typer.Typer(add_completion=False)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="Python logging level."),
) -> None:
    """Ranked wrap/unwrap rewrites for Python argument lists."""
    level = logging.getLevelName(log_level.strip().upper())
    if not isinstance(level, int):
        raise typer.BadParameter(f"unknown log level: {log_level}", param_hint="--log-level")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


async def _compute_actions(
    path: Path,
    *,
    line: int,
    column: int,
    history: UsageHistoryStore,
    config: WrappingConfig,
    token: CancellationToken,
) -> tuple[CandidateAction, ...]:
    document = Document.from_path(path)
    text = await document.get_text(token)
    if line > text.line_count:
        raise typer.BadParameter(
            f"line {line} is past the end of {path} ({text.line_count} lines)",
            param_hint="--line",
        )
    offset = text.offset_of(line - 1, column - 1)
    return await build_service(config=config, history=history).get_actions(
        document, offset, token
    )


@app.command("actions")
def actions(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    line: int = typer.Option(..., "--line", min=1, help="1-based caret line."),
    column: int = typer.Option(1, "--column", min=1, help="1-based caret column."),
    history: List[str] = typer.Option(
        [], "--history", help="Previously invoked action title, most recent first."
    ),
    root: Path = typer.Option(Path("."), "--root"),
    config: Optional[Path] = typer.Option(None, "--config"),
    json_output: bool = typer.Option(False, "--json", help="Emit actions as JSON."),
) -> None:
    """List the wrapping actions offered at a caret position."""
    wrapping_config = WrappingConfig.from_section(
        wrapping_defaults(root=root, config_path=config)
    )
    timeout_ms = server_timeout_ms(server_defaults(root=root, config_path=config))
    token = CancellationToken.from_timeout_ms(timeout_ms)
    with cancellation_scope(token):
        try:
            offered = asyncio.run(
                _compute_actions(
                    path,
                    line=line,
                    column=column,
                    history=UsageHistoryStore(history),
                    config=wrapping_config,
                    token=token,
                )
            )
        except OperationCancelled as exc:
            typer.echo(f"Cancelled: {exc.reason}", err=True)
            raise typer.Exit(code=2)
    if json_output:
        payload = [CandidateActionDTO.from_action(action).model_dump() for action in offered]
        typer.echo(json.dumps(payload, indent=2))
        return
    if not offered:
        typer.echo("No wrapping actions available.")
        return
    for index, action in enumerate(offered, start=1):
        typer.echo(f"{index}. {action.title}")


@app.command("rank")
def rank(
    titles: List[str] = typer.Argument(..., help="Action titles in offered order."),
    history: List[str] = typer.Option(
        [], "--history", help="Previously invoked action title, most recent first."
    ),
) -> None:
    """Rank action titles against a usage history."""
    ranked = rank_actions([CandidateAction(title=title) for title in titles], history)
    for action in ranked:
        typer.echo(action.title)


@app.command("lsp")
def lsp() -> None:
    """Run the language server over stdio."""
    from linewrap.server import start

    start()
