"""
Objects API CLI.

Command-line access to the objects API, plus a smoke command that runs
the full create/read/replace/delete lifecycle against the configured
server.

Usage:
    python cli.py --help
    python cli.py list
    python cli.py get ff808181932badb60193...
    python cli.py create --name "Pixel 8" --data '{"color": "Obsidian"}'
    python cli.py -v smoke
"""

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from typing import Any

import click
import httpx
import structlog

from objects_api.client.client import ObjectsClient
from objects_api.client.lifecycle import scoped_object
from objects_api.core.config import validate_project_root
from objects_api.core.exceptions import ObjectsAPIError
from objects_api.core.logging import get_logger, setup_logging
from objects_api.models.objects import (
    CreateOrReplaceRequest,
    DataPayload,
    ObjectRecord,
    PartialUpdateRequest,
)

logger = get_logger(__name__)

SMOKE_REQUEST = CreateOrReplaceRequest(
    name="Apple MacBook Pro 16",
    data=DataPayload(
        year="2023",
        price="2399.99",
        cpu_model="Apple M3 Pro",
        hard_disk_size="512 GB",
        color="Space Gray",
    ),
)

SMOKE_REPLACEMENT = CreateOrReplaceRequest(
    name="Apple MacBook Air M2 – Updated",
    data=DataPayload(
        year="2024",
        price="1299.00",
        cpu_model="Apple M2",
        hard_disk_size="256 GB",
        color="Midnight",
    ),
)


def _parse_data(raw: str | None) -> DataPayload | None:
    if raw is None:
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--data") from e
    if not isinstance(parsed, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--data")
    return DataPayload.model_validate(parsed)


def _echo_json(value: Any) -> None:
    click.echo(json.dumps(value, indent=2, ensure_ascii=False))


def _run(ctx: click.Context, action: Callable[[ObjectsClient], Awaitable[Any]]) -> Any:
    """Run one async action with a client built from the group options."""
    options = ctx.obj

    async def runner() -> Any:
        async with ObjectsClient(
            base_url=options.get("base_url"),
            timeout=options.get("timeout"),
        ) as client:
            return await action(client)

    try:
        return asyncio.run(runner())
    except (ObjectsAPIError, httpx.HTTPError) as e:
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("--base-url", default=None, help="API base URL (default: application.yaml).")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds.")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output (INFO level logging).")
@click.option("--debug", "-d", is_flag=True, help="Enable debug output (DEBUG level logging).")
@click.pass_context
def main(ctx: click.Context, base_url: str | None, timeout: float | None, verbose: bool, debug: bool) -> None:
    """Objects API CLI."""
    validate_project_root()

    if debug:
        setup_logging(level="DEBUG", format_type="console")
    elif verbose:
        setup_logging(level="INFO", format_type="console")
    else:
        setup_logging(level="WARNING", format_type="console")

    structlog.contextvars.bind_contextvars(source="cli")

    ctx.ensure_object(dict)
    if base_url is not None:
        ctx.obj["base_url"] = base_url
    if timeout is not None:
        ctx.obj["timeout"] = timeout


@main.command("list")
@click.option("--id", "ids", multiple=True, help="Only these ids (repeatable).")
@click.pass_context
def list_objects(ctx: click.Context, ids: tuple[str, ...]) -> None:
    """List objects."""
    if ids:
        records = _run(ctx, lambda client: client.list_by_ids(ids))
    else:
        records = _run(ctx, lambda client: client.list_all())
    _echo_json([record.to_wire() for record in records])


@main.command("get")
@click.argument("object_id")
@click.pass_context
def get_object(ctx: click.Context, object_id: str) -> None:
    """Show one object."""
    record = _run(ctx, lambda client: client.get_by_id(object_id))
    _echo_json(record.to_wire())


@main.command("create")
@click.option("--name", required=True, help="Object name.")
@click.option("--data", "data_json", default=None, help="Data payload as a JSON object.")
@click.pass_context
def create_object(ctx: click.Context, name: str, data_json: str | None) -> None:
    """Create an object."""
    request = CreateOrReplaceRequest(name=name, data=_parse_data(data_json))
    record = _run(ctx, lambda client: client.create(request))
    _echo_json(record.to_wire())


@main.command("replace")
@click.argument("object_id")
@click.option("--name", required=True, help="New object name.")
@click.option("--data", "data_json", default=None, help="New data payload as a JSON object.")
@click.pass_context
def replace_object(ctx: click.Context, object_id: str, name: str, data_json: str | None) -> None:
    """Replace an object's name and data."""
    request = CreateOrReplaceRequest(name=name, data=_parse_data(data_json))
    record = _run(ctx, lambda client: client.replace(object_id, request))
    _echo_json(record.to_wire())


@main.command("patch")
@click.argument("object_id")
@click.option("--name", default=None, help="New object name.")
@click.option("--data", "data_json", default=None, help="Data attributes to change, as JSON.")
@click.pass_context
def patch_object(ctx: click.Context, object_id: str, name: str | None, data_json: str | None) -> None:
    """Change only the given members of an object."""
    if name is None and data_json is None:
        raise click.UsageError("Give --name, --data or both.")
    request = PartialUpdateRequest(name=name, data=_parse_data(data_json))
    record = _run(ctx, lambda client: client.update_partial(object_id, request))
    _echo_json(record.to_wire())


@main.command("delete")
@click.argument("object_id")
@click.pass_context
def delete_object(ctx: click.Context, object_id: str) -> None:
    """Delete an object."""
    outcome = _run(ctx, lambda client: client.delete(object_id))
    click.echo(f"{outcome.status_code} {outcome.message or ''}".rstrip())


SMOKE_STEPS = ("list", "create", "get", "replace", "delete", "get after delete")


async def _smoke(client: ObjectsClient) -> list[tuple[str, bool, str]]:
    """
    Run the lifecycle and collect (step, passed, detail) results.

    A step that raises is recorded as failed and ends the run. The record
    created by then is still deleted on the way out.
    """
    results: list[tuple[str, bool, str]] = []

    def check(step: str, passed: bool, detail: str = "") -> None:
        results.append((step, passed, detail))

    try:
        records = await client.list_all()
        check("list", bool(records) and all(r.id and r.name for r in records), f"{len(records)} objects")

        async with scoped_object(client, SMOKE_REQUEST) as created:
            check(
                "create",
                _matches(created, SMOKE_REQUEST) and created.created_at is not None,
                f"id={created.id}",
            )

            fetched = await client.get_by_id(created.id)
            check("get", fetched.id == created.id and _matches(fetched, SMOKE_REQUEST), f"name={fetched.name}")

            replaced = await client.replace(created.id, SMOKE_REPLACEMENT)
            check(
                "replace",
                replaced.id == created.id
                and _matches(replaced, SMOKE_REPLACEMENT)
                and replaced.updated_at is not None,
                f"name={replaced.name}",
            )

            outcome = await client.delete(created.id)
            check("delete", outcome.is_ok, f"status={outcome.status_code}")

            after = await client.get_by_id_raw(created.id)
            check("get after delete", after.is_not_found, f"status={after.status_code}")
    except (ObjectsAPIError, httpx.HTTPError) as e:
        check(SMOKE_STEPS[len(results)], False, str(e))

    return results


def _matches(record: ObjectRecord, request: CreateOrReplaceRequest) -> bool:
    record_data = record.data.to_wire() if record.data else None
    request_data = request.data.to_wire() if request.data else None
    return record.name == request.name and record_data == request_data


@main.command("smoke")
@click.pass_context
def smoke(ctx: click.Context) -> None:
    """Run the CRUD lifecycle against the server and report each step."""
    results = _run(ctx, _smoke)

    click.echo("Lifecycle Results")
    click.echo("-" * 40)
    for step, passed, detail in results:
        status = "PASS" if passed else "FAIL"
        click.echo(f"{status}  {step:<18} {detail}")

    failed = [step for step, passed, _ in results if not passed]
    logger.info("Smoke run finished", steps=len(results), failed=failed)
    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
