from __future__ import annotations

import json
import logging
from typing import Any

import typer

from yaml_expand.core.errors import DocumentLoadError, DocumentWriteError, ExpandError, ReplacementLoadError
from yaml_expand.core.expand.expand_document import expand_documents
from yaml_expand.core.expand.replacements import load_replacements
from yaml_expand.core.io.load_document import dump_documents, load_documents

app = typer.Typer(add_completion=False, no_args_is_help=True)

DEFAULT_REPLACEMENTS_DIR = "expand"
REPLACEMENTS_ENVVAR = "YAML_EXPAND_DIR"


@app.callback()
def _callback() -> None:
    """yaml-expand: expand |expand-tagged keys with placeholder replacement lists."""
    return


@app.command("expand")
def expand(
    path: str = typer.Argument(..., help="Path to a document (.yaml/.yml/.json)"),
    replacements_dir: str = typer.Option(
        DEFAULT_REPLACEMENTS_DIR,
        "--replacements",
        "-r",
        envvar=REPLACEMENTS_ENVVAR,
        help="Directory of <name>.txt replacement files",
    ),
    out: str | None = typer.Option(None, "--out", help="Write expanded YAML here (default: stdout)"),
    format: str = typer.Option("text", "--format", help="Output format: text|json"),
    require_substitution: bool = typer.Option(
        False,
        "--require-substitution",
        help="Fail when no placeholder was substituted",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log loaded files and expanded keys"),
) -> None:
    """Expand every |expand-tagged key of a document."""
    _configure_logging(verbose)

    if format not in ("text", "json"):
        _print_errors(
            [
                ExpandError(
                    code="E_EXPAND_UNKNOWN_FORMAT",
                    message=f"unknown format: {format} (choose one of: text, json)",
                    path="format",
                )
            ]
        )
        raise typer.Exit(code=2)

    if format == "json" and out is None:
        _print_errors(
            [
                ExpandError(
                    code="E_EXPAND_JSON_NEEDS_OUT",
                    message="--format json requires --out",
                    path="out",
                )
            ]
        )
        raise typer.Exit(code=2)

    def _to_item(e: ExpandError) -> dict:
        if isinstance(e, ReplacementLoadError):
            source = "replacements"
        elif isinstance(e, (DocumentLoadError, DocumentWriteError)):
            source = "document"
        else:
            source = "expand"
        return {
            "code": e.code,
            "message": e.message,
            "file": e.file,
            "path": e.path,
            "source": source,
        }

    def _fail(errors: list[ExpandError], exit_code: int, placeholders: list[str] | None = None) -> None:
        if format == "json":
            _emit_json(
                {
                    "ok": False,
                    "expand_found": None,
                    "expanded": None,
                    "placeholders": placeholders or [],
                    "out": out,
                    "errors": [_to_item(e) for e in errors],
                }
            )
        else:
            _print_errors(errors)
        raise typer.Exit(code=exit_code)

    try:
        replacements = load_replacements(replacements_dir)
    except ReplacementLoadError as e:
        _fail([e], 1)

    placeholders = list(replacements.keys())

    try:
        docs = load_documents(path)
    except DocumentLoadError as e:
        _fail([e], 1, placeholders)

    expanded_docs, expand_found, expanded = expand_documents(docs, replacements)

    if require_substitution and not expanded:
        _fail(
            [
                ExpandError(
                    code="E_EXPAND_NOTHING_SUBSTITUTED",
                    message="no placeholder was substituted (--require-substitution)",
                    file=path,
                )
            ],
            2,
            placeholders,
        )

    try:
        text = dump_documents(expanded_docs, out)
    except DocumentWriteError as e:
        _fail([e], 1, placeholders)

    if format == "json":
        _emit_json(
            {
                "ok": True,
                "expand_found": expand_found,
                "expanded": expanded,
                "placeholders": placeholders,
                "out": out,
                "errors": [],
            }
        )
        return

    if not expand_found:
        typer.echo(f"WARN: no |expand keys found in {path}", err=True)
    elif not expanded:
        typer.echo(f"WARN: |expand keys found in {path} but no placeholder matched", err=True)

    if out is None:
        typer.echo(text, nl=False)
        return
    typer.echo(f"OK: wrote {out} (expand_found={expand_found}, expanded={expanded})")


@app.command("placeholders")
def placeholders(
    replacements_dir: str = typer.Option(
        DEFAULT_REPLACEMENTS_DIR,
        "--replacements",
        "-r",
        envvar=REPLACEMENTS_ENVVAR,
        help="Directory of <name>.txt replacement files",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """List the placeholders a replacement directory provides."""
    _configure_logging(verbose)

    try:
        replacements = load_replacements(replacements_dir)
    except ReplacementLoadError as e:
        _print_errors([e])
        raise typer.Exit(code=1)

    typer.echo("Placeholders:")
    for placeholder, values in replacements.items():
        typer.echo(f"- {placeholder} ({len(values)}): {', '.join(values)}")


def _emit_json(fields: dict[str, Any]) -> None:
    payload = {"tool": "yaml-expand", "command": "expand", **fields}
    typer.echo(json.dumps(payload, indent=2, sort_keys=True))


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def _print_errors(errors: list[ExpandError]) -> None:
    errors_sorted = sorted(errors, key=lambda e: (e.file or "", e.path or "", e.code))
    for e in errors_sorted:
        typer.echo(str(e), err=True)


def main() -> None:
    app(prog_name="yaml-expand")


if __name__ == "__main__":
    main()
