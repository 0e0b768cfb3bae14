"""Command line interface for glslwrap.

This module provides the ``glslwrap`` command: it compiles shader stage files
against a hidden OpenGL context and writes a typed Python wrapper module for
the linked program.
"""

import os
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast

import arrow
import typer
import watchdog.events
import watchdog.observers
from loguru import logger
from watchdog.events import FileSystemEventHandler

from glslwrap.compiler.arguments import (
    USAGE,
    CompilerArguments,
    is_help_request,
    parse_arguments,
)
from glslwrap.compiler.pipeline import Pipeline
from glslwrap.errors import GLVersionError, GlslWrapError
from glslwrap.gl.backend import PyOpenGLBackend
from glslwrap.gl.context import GLConfig, create_context

# Define type variables for TypedCallable
F = TypeVar("F", bound=Callable[..., Any])

FAILURE_EXIT_CODE = -1

# The flag grammar uses single-dash and slash flags click knows nothing about
PASSTHROUGH_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


# TypedCommand decorator helper
def typed_command(app_command: Any) -> Callable[[F], F]:
    """Wrap typer command with proper typing for mypy."""

    def decorator(func: F) -> F:
        return cast(F, app_command(func))

    return decorator


app = typer.Typer(
    name="glslwrap",
    help=(
        "Compile OpenGL shader stages and generate typed Python wrapper classes. "
        "Commands: compile, watch. Pass -help to a command for the flag reference."
    ),
    add_completion=False,
)

ARGS_ARG = typer.Argument(
    None, help="Shader files and flags (-r, -s, out=, name=, vert=, ...)"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", help="Enable debug logging")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")


def _create_pipeline(arguments: CompilerArguments) -> Pipeline:
    """Pipeline running against a real hidden-window context."""
    config = GLConfig.for_version(arguments.context_version)
    return Pipeline(PyOpenGLBackend(), lambda: create_context(config=config))


def generate_wrapper(arguments: CompilerArguments) -> Path:
    """Run the pipeline for ``arguments`` and write the generated module.

    Returns:
        Path of the written module

    Raises:
        GlslWrapError: If the context cannot be created or the program
            cannot be compiled, linked or wrapped
    """
    if not arguments.stages:
        raise ValueError("No shader stages were given")

    source = _create_pipeline(arguments).run(
        list(arguments.stages), arguments.generation_options()
    )

    output = arguments.output
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(source)
    logger.info(f"Wrote {arguments.namespace}.{arguments.class_name} to {output}")
    return output


def _run(args: list[str]) -> None:
    """Generate the wrapper once, mapping failures to exit codes."""
    if not args:
        logger.error("No arguments passed.")
        raise typer.Exit(FAILURE_EXIT_CODE)

    try:
        generate_wrapper(parse_arguments(args))
    except GLVersionError as e:
        # Reported, but not a failure of the invocation
        logger.error(str(e))
    except (GlslWrapError, ValueError) as e:
        logger.error(f"Wrapper generation failed: {e}")
        raise typer.Exit(FAILURE_EXIT_CODE) from e


@typed_command(app.command("compile", context_settings=PASSTHROUGH_SETTINGS))
def compile_shader(
    args: list[str] | None = ARGS_ARG,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Compile shader stages and write the wrapper module.

    Example: glslwrap compile -name=Blur blur.vert blur.frag
    """
    _configure_logging(verbose)
    args = args or []
    if is_help_request(args):
        typer.echo(USAGE)
        return
    _run(args)


class StageChangeHandler(FileSystemEventHandler):  # type: ignore
    """Event handler for shader stage file changes."""

    def __init__(self, stage_files: list[Path]):
        """Initialize stage change handler.

        Args:
            stage_files: Stage files to watch
        """
        self.stage_files = {os.path.realpath(path) for path in stage_files}
        self.needs_rebuild = False

    def _check(self, path: str | bytes) -> None:
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        if os.path.realpath(path) in self.stage_files:
            logger.info(f"Detected changes in {path}")
            self.needs_rebuild = True

    def on_modified(self, event: watchdog.events.FileSystemEvent) -> None:
        self._check(event.src_path)

    def on_created(self, event: watchdog.events.FileSystemEvent) -> None:
        self._check(event.src_path)

    def on_moved(self, event: watchdog.events.FileSystemEvent) -> None:
        # Editors that save through a temporary file
        self._check(event.dest_path)


def _rebuild(args: list[str]) -> None:
    timestamp = arrow.utcnow().format("YYYY-MM-DD HH:mm:ss UTC")
    try:
        output = generate_wrapper(parse_arguments(args))
    except (GlslWrapError, ValueError) as e:
        logger.error(f"[{timestamp}] Rebuild failed: {e}")
        return
    logger.info(f"[{timestamp}] Rebuilt {output}")


@typed_command(app.command("watch", context_settings=PASSTHROUGH_SETTINGS))
def watch_shader(
    args: list[str] | None = ARGS_ARG,
    interval: float = typer.Option(
        0.2, "--interval", help="Seconds between checks for changes"
    ),
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Compile shader stages, then regenerate the wrapper on every change.

    Example: glslwrap watch -r blur.vert blur.frag
    """
    _configure_logging(verbose)
    args = args or []
    if is_help_request(args):
        typer.echo(USAGE)
        return

    arguments = parse_arguments(args)
    if not arguments.stages:
        logger.error("No shader stages were given")
        raise typer.Exit(FAILURE_EXIT_CODE)
    _rebuild(args)

    handler = StageChangeHandler(arguments.stage_paths)
    observer = watchdog.observers.Observer()
    # Watch the files' directories, not the files themselves
    for directory in sorted({str(path.resolve().parent) for path in arguments.stage_paths}):
        observer.schedule(handler, path=directory, recursive=False)
    observer.start()
    logger.info("Watching for changes (press Ctrl+C to exit)...")

    try:
        while observer.is_alive():
            time.sleep(interval)
            if handler.needs_rebuild:
                handler.needs_rebuild = False
                _rebuild(args)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received, stopping...")
    finally:
        observer.stop()
        observer.join()


def main() -> None:
    """Run the application."""
    app()


if __name__ == "__main__":
    main()
