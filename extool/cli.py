# -*- coding: utf-8 -*-
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer

from extool import VERSION
from extool.config import get_config_path, get_settings
from extool.console import error_console, main_console as console
from extool.constants import (
    CLI_CENSOR_HELP,
    CLI_CHECK_HELP,
    CLI_CWD_HELP,
    CLI_DEBUG_HELP,
    CLI_ENV_HELP,
    CLI_MAIN_INTRODUCTION,
    CLI_OUTPUT_FILE_HELP,
    CLI_PRIORITY_HELP,
    CLI_RUN_HELP,
    CLI_TIMEOUT_HELP,
    CLI_VERSION_HELP,
    CLI_WHICH_HELP,
)
from extool.error_handlers import handle_cmd_exception
from extool.tool import ProcessPriority, ToolSpecification, resolve_executable, start

LOG = logging.getLogger(__name__)


def configure_logger(ctx: typer.Context, param: typer.CallbackParam, debug: bool):
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)

    if debug:
        LOG.debug("Config file location: %s", get_config_path())
        LOG.debug("Settings: %s", get_settings())

    return debug


def print_version(ctx: typer.Context, param: typer.CallbackParam, value: bool):
    if not value or ctx.resilient_parsing:
        return

    console.print(f"extool, version {VERSION}")
    raise typer.Exit()


def parse_environment(pairs: List[str]) -> Dict[str, str]:
    """
    Parse KEY=VALUE pairs into an environment overlay.
    """
    environment = {}

    for pair in pairs:
        key, sep, value = pair.partition("=")

        if not sep or not key:
            raise typer.BadParameter(
                f"Expected KEY=VALUE, got {pair!r}", param_hint="--env"
            )

        environment[key] = value

    return environment


app = typer.Typer(
    rich_markup_mode="rich", help=CLI_MAIN_INTRODUCTION, add_completion=False
)


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", help=CLI_DEBUG_HELP, callback=configure_logger, is_eager=True
    ),
    version: bool = typer.Option(
        False, "--version", help=CLI_VERSION_HELP, callback=print_version, is_eager=True
    ),
):
    LOG.info("extool started")


@app.command(name="run", help=CLI_RUN_HELP)
@handle_cmd_exception
def run(
    executable: str = typer.Argument(..., help="Executable name or path."),
    arguments: str = typer.Argument("", help="Argument string for the executable."),
    timeout: Optional[float] = typer.Option(None, "--timeout", help=CLI_TIMEOUT_HELP),
    cwd: Optional[Path] = typer.Option(None, "--cwd", help=CLI_CWD_HELP),
    env: Optional[List[str]] = typer.Option(None, "--env", help=CLI_ENV_HELP),
    output_file: Optional[Path] = typer.Option(
        None, "--output-file", help=CLI_OUTPUT_FILE_HELP
    ),
    censor: Optional[List[str]] = typer.Option(None, "--censor", help=CLI_CENSOR_HELP),
    priority: ProcessPriority = typer.Option(
        ProcessPriority.BELOW_NORMAL, "--priority", help=CLI_PRIORITY_HELP
    ),
    check: bool = typer.Option(True, "--check/--no-check", help=CLI_CHECK_HELP),
):
    settings = get_settings()

    specification = ToolSpecification(
        executable_path=executable,
        arguments=arguments,
        environment_variables=parse_environment(env or []),
        working_directory=str(cwd) if cwd else None,
        output_file_path=str(output_file) if output_file else None,
        censored_strings=tuple(censor or ()),
        process_priority=priority,
    )

    instance = start(specification)
    result = instance.get_result(
        timeout if timeout is not None else settings.default_timeout
    )

    result.forward_outputs()

    if result.standard_output:
        console.out(result.standard_output, end="", highlight=False)

    if result.standard_error:
        error_console.out(result.standard_error, end="", highlight=False)

    if check:
        result.verify_success()

    status = "[succeeded]Succeeded[/succeeded]" if result.succeeded else "[failed]Failed[/failed]"
    error_console.print(
        f"{status} [tool_path]{instance.executable_path}[/tool_path] "
        f"exit code [number]{result.exit_code}[/number] "
        f"in [number]{result.duration:.2f}s[/number]"
    )

    if not result.succeeded:
        raise typer.Exit(code=result.exit_code)


@app.command(name="which", help=CLI_WHICH_HELP)
@handle_cmd_exception
def which(name: str = typer.Argument(..., help="Executable name.")):
    console.out(resolve_executable(name), highlight=False)


cli = typer.main.get_command(app)
