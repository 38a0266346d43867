"""Command-line entry point: execute one GraphQL operation over HTTP.

Example::

    gql-httpx-link query 'mutation($file: Upload!) { upload(file: $file) { id } }' \\
        --endpoint https://api.example.com/graphql \\
        --header 'Authorization: Bearer abc' \\
        --file file=./report.pdf

`--file PATH=LOCAL` places an `UploadFile` read from LOCAL at the dotted PATH
inside the variables (numeric segments index lists), which switches the
request to multipart encoding.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, List, Optional

import typer
from dotenv import find_dotenv, load_dotenv

from .config import get_settings
from .context import Context, HttpLinkHeaders
from .exceptions import HttpLinkError, HttpLinkServerError
from .files import UploadFile
from .link import HttpLink
from .models import Request, Response

app = typer.Typer(help="Execute GraphQL operations over HTTP (JSON or multipart uploads)")


@app.callback()
def _root() -> None:
    """Keep `query` as an explicit subcommand."""


def _parse_header(raw: str) -> tuple[str, str]:
    name, sep, value = raw.partition(":")
    if not sep or not name.strip():
        raise typer.BadParameter(f"Invalid header '{raw}', expected 'Name: value'")
    return name.strip(), value.strip()


def _set_path(root: Dict[str, Any], segments: List[str], value: Any) -> None:
    """Assign `value` at `segments` inside `root`, creating containers as needed."""
    cursor: Any = root
    for i, seg in enumerate(segments):
        last = i == len(segments) - 1
        nxt: Any = value if last else ([] if segments[i + 1].isdigit() else {})
        if isinstance(cursor, list):
            if not seg.isdigit():
                raise typer.BadParameter(f"Expected list index at '{seg}' in {'.'.join(segments)}")
            idx = int(seg)
            if idx == len(cursor):
                cursor.append(nxt)
            elif idx < len(cursor):
                if last or cursor[idx] is None:
                    cursor[idx] = nxt
            else:
                raise typer.BadParameter(f"List index {idx} out of range in {'.'.join(segments)}")
            cursor = cursor[idx]
        elif isinstance(cursor, dict):
            if last or cursor.get(seg) is None:
                cursor[seg] = nxt
            cursor = cursor[seg]
        else:
            raise typer.BadParameter(f"Cannot descend into {type(cursor).__name__} at '{seg}'")


def _response_to_json(response: Response) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if response.data is not None:
        out["data"] = response.data
    if response.errors is not None:
        out["errors"] = [e.model_dump(exclude_none=True) for e in response.errors]
    return out


@app.command(help="Execute a single query or mutation and print the result as JSON.")
def query(
    document: str = typer.Argument(..., help="GraphQL operation text"),
    variables: Optional[str] = typer.Option(None, help="Variables as a JSON object"),
    operation_name: Optional[str] = typer.Option(None, help="Operation name to execute"),
    header: List[str] = typer.Option([], "--header", "-H", help="Extra 'Name: value' header"),
    file: List[str] = typer.Option(
        [], "--file", "-F", help="Upload as PATH=LOCAL_FILE, PATH relative to variables"
    ),
    endpoint: Optional[str] = typer.Option(
        None, help="GraphQL endpoint (overrides GRAPHQL_ENDPOINT)"
    ),
) -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    try:
        parsed_vars = json.loads(variables) if variables else {}
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--variables is not valid JSON: {e}") from e
    if not isinstance(parsed_vars, dict):
        raise typer.BadParameter("--variables must be a JSON object")

    for spec in file:
        path, sep, local = spec.partition("=")
        if not sep or not path or not local:
            raise typer.BadParameter(f"Invalid --file '{spec}', expected PATH=LOCAL_FILE")
        try:
            upload = UploadFile.from_path(local)
        except OSError as e:
            raise typer.BadParameter(f"Cannot read --file {local!r}: {e}") from e
        _set_path(parsed_vars, path.split("."), upload)

    context = Context()
    if header:
        context = context.with_entry(HttpLinkHeaders(headers=dict(_parse_header(h) for h in header)))

    request = Request(
        query=document,
        variables=parsed_vars,
        operation_name=operation_name,
        context=context,
    )
    if endpoint:
        settings = settings.model_copy(update={"GRAPHQL_ENDPOINT": endpoint})
    if not settings.GRAPHQL_ENDPOINT:
        raise typer.BadParameter("No endpoint given; pass --endpoint or set GRAPHQL_ENDPOINT")

    async def _run() -> Response:
        async with HttpLink.from_settings(settings) as link:
            return await link.execute(request)

    try:
        response = asyncio.run(_run())
    except HttpLinkServerError as e:
        typer.echo(f"{type(e).__name__}: {e}", err=True)
        if e.parsed_response is not None:
            typer.echo(json.dumps(_response_to_json(e.parsed_response), indent=2), err=True)
        raise typer.Exit(code=1)
    except HttpLinkError as e:
        typer.echo(f"{type(e).__name__}: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(_response_to_json(response), indent=2))


def main() -> None:  # pragma: no cover - console script shim
    env_file = find_dotenv(usecwd=True)
    if env_file:
        load_dotenv(env_file)
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
