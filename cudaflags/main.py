"""
cudaflags — CLI entrypoint.

Usage:
    cudaflags --help
    cudaflags gpus --cuda 12.0
    cudaflags flags --cuda 12.0 -C 7.5 -C 8.6
    cudaflags config check
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from cudaflags import __version__
from cudaflags.core.observability.logging_config import resolve_level, setup_logging_from_env

# Fields of CapabilityResult that ``flags --field`` can print
_FIELDS = (
    "capabilities",
    "forward_capability",
    "capabilities_and_forward",
    "arch_names",
    "real_arches",
    "virtual_arches",
    "arches",
    "gencode",
)


@click.group()
@click.version_option(version=__version__, prog_name="cudaflags")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to cudaflags.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """cudaflags — CUDA compute capabilities to nvcc architecture flags."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging_from_env(resolve_level(debug=debug, verbose=verbose, quiet=quiet))


def _fail(message: str) -> None:
    click.secho(f"❌ {message}", fg="red")
    sys.exit(1)


# ── Hardware ────────────────────────────────────────────────────


@cli.command()
@click.option("--cuda", "cuda_version", default=None, help="CUDA toolkit version.")
@click.option("--all", "show_all", is_flag=True, help="List the whole table, not just supported GPUs.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def gpus(ctx: click.Context, cuda_version: str | None, show_all: bool, as_json: bool) -> None:
    """List the GPUs a CUDA toolkit can target."""
    from cudaflags.core.use_cases.resolve import run_environment

    result = run_environment(config_path=ctx.obj.get("config_path"), cuda_version=cuda_version)

    if result.error:
        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
            sys.exit(1)
        _fail(result.error)

    env = result.environment
    assert env is not None
    supported = {g.compute_capability for g in env.supported_gpus}
    rows = result.gpus if show_all else env.supported_gpus

    if as_json:
        click.echo(json.dumps({
            "cuda_version": env.cuda_version,
            "gpus": [
                {**g.model_dump(), "supported": g.compute_capability in supported}
                for g in rows
            ],
        }, indent=2))
        return

    if not ctx.obj.get("quiet"):
        click.secho(f"\n🖥️  GPUs for CUDA {env.cuda_version}", fg="cyan", bold=True)
    if not rows:
        click.secho("   ⚠️  No supported GPUs", fg="yellow")
    for g in rows:
        marker = "✓" if g.compute_capability in supported else "✗"
        click.echo(
            f"   {marker} {g.compute_capability:<6} {g.arch_name:<10} "
            f"CUDA {g.min_cuda_version} – {g.max_cuda_version}"
        )
    click.echo()


@cli.command()
@click.option("--cuda", "cuda_version", default=None, help="CUDA toolkit version.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def archs(ctx: click.Context, cuda_version: str | None, as_json: bool) -> None:
    """Show architecture families and their supported capabilities."""
    from cudaflags.core.use_cases.resolve import run_environment

    result = run_environment(config_path=ctx.obj.get("config_path"), cuda_version=cuda_version)

    if result.error:
        if as_json:
            click.echo(json.dumps(result.to_dict(), indent=2))
            sys.exit(1)
        _fail(result.error)

    env = result.environment
    assert env is not None

    if as_json:
        click.echo(json.dumps({
            "cuda_version": env.cuda_version,
            "arch_name_to_capabilities": env.arch_name_to_capabilities,
            "capability_to_name": env.capability_to_name,
        }, indent=2))
        return

    for name, caps in env.arch_name_to_capabilities.items():
        click.echo(f"{name:<10} {' '.join(caps)}")


# ── Flags ───────────────────────────────────────────────────────


@cli.command()
@click.option("--cuda", "cuda_version", default=None, help="CUDA toolkit version.")
@click.option(
    "--capability",
    "-C",
    "capabilities",
    multiple=True,
    help="Compute capability to build for (repeatable, newest last).",
)
@click.option(
    "--forward-compat/--no-forward-compat",
    default=None,
    help="Add a +PTX target for the newest capability (default: on).",
)
@click.option(
    "--field",
    "field_name",
    type=click.Choice(_FIELDS),
    default=None,
    help="Print one field, space-separated, for use in scripts.",
)
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def flags(
    ctx: click.Context,
    cuda_version: str | None,
    capabilities: tuple[str, ...],
    forward_compat: bool | None,
    field_name: str | None,
    as_json: bool,
) -> None:
    """Format capabilities into nvcc architecture tokens and -gencode flags."""
    from cudaflags.core.use_cases.resolve import run_resolve

    result = run_resolve(
        config_path=ctx.obj.get("config_path"),
        cuda_version=cuda_version,
        capabilities=capabilities,
        forward_compat=forward_compat,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(1 if result.error else 0)

    if result.error:
        _fail(result.error)

    caps = result.result
    assert caps is not None

    if field_name:
        value = getattr(caps, field_name)
        click.echo(value if isinstance(value, str) else " ".join(value))
        return

    click.secho(f"\n⚙️  CUDA {result.environment.cuda_version}", fg="cyan", bold=True)
    click.echo(f"   Capabilities:    {', '.join(caps.capabilities_and_forward)}")
    click.echo(f"   Architectures:   {', '.join(caps.arch_names)}")
    click.echo(f"   Arches:          {' '.join(caps.arches)}")
    click.secho("   Gencode:", fg="white", bold=True)
    for flag in caps.gencode:
        click.echo(f"     {flag}")
    click.echo()


# ── Config ──────────────────────────────────────────────────────


@cli.group()
def config() -> None:
    """Configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate cudaflags.yml."""
    from cudaflags.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.config is not None
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   CUDA: {result.config.cuda_version or '(not set)'}")
        caps = result.config.cuda_capabilities
        click.echo(f"   Capabilities: {', '.join(caps) if caps else '(all supported)'}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
