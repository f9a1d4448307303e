from __future__ import annotations

import importlib
import sys
import threading
import traceback
import types
import typing as t
from pathlib import Path

import pydantic as p

import ecos
import ecos.lib.cli as click
from ecos.core import EcosContainer
from ecos.model import DeploymentEnvironment

COMMANDS = ("evaluate", "report", "schema")
CONFIG_ROOT = Path(ecos.__file__).resolve().parents[1] / "config"

# command modules loaded while parsing; wired once the container is booted
_loaded: list[types.ModuleType] = []


class LazyGroup(click.Group):
    """Imports a subcommand's module only when that subcommand is invoked."""

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(COMMANDS)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in COMMANDS:
            return None
        module = importlib.import_module(f"ecos.cli.{cmd_name}")
        _loaded.append(module)
        return getattr(module, cmd_name)


@click.group(cls=LazyGroup)
@click.option(
    "-E",
    "--env",
    type=click.EnumType(DeploymentEnvironment),
    default=DeploymentEnvironment.Local.value,
    show_default=True,
)
@click.option("-c", "--config-root", type=click.URIParamType(dir_ok=True), default=str(CONFIG_ROOT))
@click.option("-s", "--secrets-path", type=click.URIParamType(dir_ok=True), default=None)
@click.option(
    "-o",
    "--override",
    multiple=True,
    metavar="KEY=VALUE",
    help="Override a configuration value, e.g. -o evaluation.default_score=1",
)
@click.option("-D", "--debug", is_flag=True, help="Log verbosely and print tracebacks.")
@click.pass_obj
def main(
    ct: EcosContainer,
    env: DeploymentEnvironment,
    config_root: p.FileUrl,
    secrets_path: p.AnyUrl | None,
    override: tuple[str, ...],
    debug: bool,
) -> None:
    """Grade ECOS sessions and read back their evaluations."""
    EcosContainer.boot(
        ct,
        debug=debug,
        env=env,
        config_root=config_root,
        secrets_path=secrets_path,
        override=override,
        wiring=tuple(_loaded),
    )


def execute_command(*argv: str) -> t.NoReturn:
    threading.current_thread().name = "ecos-0"
    args = list(argv or sys.argv)
    prog, args = Path(args[0]).name, args[1:]
    ct = EcosContainer()

    code: int
    try:
        with main.make_context(prog, args=args) as ctx:
            ctx.obj = ct
            code = t.cast(int | None, main.invoke(ctx)) or 0
    except (EOFError, KeyboardInterrupt, click.Abort):
        click.echo("Aborted!", err=True)
        code = 1
    except click.exceptions.Exit as ex:
        code = ex.exit_code
    except click.ClickException as ex:
        ex.show()
        code = ex.exit_code
    except Exception as ex:
        click.echo(f"{click.style('ERROR', fg='red')} {ex}", err=True)
        if "-D" in args or "--debug" in args:
            traceback.print_exc()
        code = 1
    finally:
        ct.shutdown_resources()
    sys.exit(code)


if __name__ == "__main__":
    execute_command(*sys.argv)
