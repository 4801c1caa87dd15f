from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable
from urllib.parse import unquote, urlparse

from pygls.lsp.server import LanguageServer
from pydantic import ValidationError
from lsprotocol.types import (
    TEXT_DOCUMENT_CODE_ACTION,
    CodeAction,
    CodeActionKind,
    CodeActionOptions,
    CodeActionParams,
    Command,
    Position,
    Range,
    TextEdit as LspTextEdit,
    WorkspaceEdit,
)

from linewrap import __version__
from linewrap.cancellation import CancellationToken, cancellation_scope
from linewrap.config import (
    WrappingConfig,
    server_defaults,
    server_timeout_ms,
    wrapping_defaults,
)
from linewrap.document import Document
from linewrap.exceptions import OperationCancelled
from linewrap.invariants import never
from linewrap.schema import (
    CandidateActionDTO,
    RankRequest,
    RankResponse,
    RecordInvocationRequest,
    RecordInvocationResponse,
)
from linewrap.wrapping.history import default_history_store
from linewrap.wrapping.model import CandidateAction
from linewrap.wrapping.ranking import rank_actions
from linewrap.wrapping.service import build_service

log = logging.getLogger(__name__)

server = LanguageServer("linewrap", __version__)
RECORD_INVOCATION_COMMAND = "linewrap.recordInvocation"
RANK_COMMAND = "linewrap.rankActions"


def _require_payload(payload: object, *, command: str) -> dict[str, object]:
    if payload is None:
        never("missing command payload", command=command)
    if not isinstance(payload, dict):
        never(
            "invalid command payload type",
            command=command,
            payload_type=type(payload).__name__,
        )
    return payload


def _uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


def _workspace_root(ls: LanguageServer | None) -> Path | None:
    if ls is None or not ls.workspace.root_path:
        return None
    return Path(ls.workspace.root_path)


def _document_for(ls: LanguageServer | None, uri: str) -> Document:
    if ls is None:
        return Document(uri, path=_uri_to_path(uri))
    text_document = ls.workspace.get_text_document(uri)
    return Document(uri, text=text_document.source, version=text_document.version)


def _to_code_action(uri: str, action: CandidateAction) -> CodeAction:
    edits = [
        LspTextEdit(
            range=Range(
                start=Position(line=edit.start[0], character=edit.start[1]),
                end=Position(line=edit.end[0], character=edit.end[1]),
            ),
            new_text=edit.replacement,
        )
        for edit in action.edits
    ]
    return CodeAction(
        title=action.title,
        kind=CodeActionKind.RefactorRewrite,
        edit=WorkspaceEdit(changes={uri: edits}),
        command=Command(
            title=action.title,
            command=RECORD_INVOCATION_COMMAND,
            arguments=[{"title": action.identity_title}],
        ),
    )


@server.feature(
    TEXT_DOCUMENT_CODE_ACTION,
    CodeActionOptions(code_action_kinds=[CodeActionKind.RefactorRewrite]),
)
async def code_action(
    ls: LanguageServer | None, params: CodeActionParams
) -> list[CodeAction] | None:
    uri = params.text_document.uri
    root = _workspace_root(ls)
    document = _document_for(ls, uri)
    config = WrappingConfig.from_section(wrapping_defaults(root=root))
    token = CancellationToken.from_timeout_ms(server_timeout_ms(server_defaults(root=root)))
    service = build_service(config=config, history=default_history_store())
    with cancellation_scope(token):
        try:
            text = await document.get_text(token)
            start = params.range.start
            if start.line >= text.line_count:
                return []
            offset = text.offset_of(start.line, start.character)
            actions = await service.get_actions(document, offset, token)
        except OperationCancelled as exc:
            log.debug("code action request for %s aborted: %s", uri, exc.reason)
            return None
    return [_to_code_action(uri, action) for action in actions]


@server.command(RECORD_INVOCATION_COMMAND)
def execute_record_invocation(ls: LanguageServer | None, payload: dict | None = None) -> dict:
    payload = _require_payload(payload, command=RECORD_INVOCATION_COMMAND)
    try:
        request = RecordInvocationRequest.model_validate(payload)
    except ValidationError as exc:
        return RecordInvocationResponse(exit_code=2, errors=[str(exc)]).model_dump()
    history = default_history_store().record(request.title)
    log.info("action invoked: %s", request.title)
    return RecordInvocationResponse(history=list(history)).model_dump()


@server.command(RANK_COMMAND)
def execute_rank(ls: LanguageServer | None, payload: dict | None = None) -> dict:
    payload = _require_payload(payload, command=RANK_COMMAND)
    try:
        request = RankRequest.model_validate(payload)
    except ValidationError as exc:
        return RankResponse(exit_code=2, errors=[str(exc)]).model_dump()
    history = request.history
    if history is None:
        history = list(default_history_store().snapshot())
    ranked = rank_actions([dto.to_action() for dto in request.actions], history)
    return RankResponse(
        actions=[CandidateActionDTO.from_action(action) for action in ranked]
    ).model_dump()


def start(start_fn: Callable[[], None] | None = None) -> None:
    """Start the language server over stdio."""
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
