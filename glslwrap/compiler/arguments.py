"""Flag grammar of the wrapper compiler command line.

Flags may be prefixed with ``-`` or ``/``::

    glslwrap compile -r -name=Blur -out=shaders/blur.py blur.vert blur.frag

Unknown flags, unparseable values and unreadable files are logged and
skipped; the remaining arguments are still processed.
"""

import keyword
import re
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from glslwrap.compiler.models import (
    RESERVED_CLASS_NAMES,
    GenerationOptions,
    StageKind,
    StageSource,
)
from glslwrap.errors import ArgParseError

DEFAULT_NAMESPACE = "Shaders"
DEFAULT_CONTEXT_VERSION = (3, 0)
HELP_FLAGS = ("-help", "/help")

USAGE = """\
Arguments: (May be prefixed with - or /)
  - r : Reloads the shader from files in the current directory whenever the shader is compiled
  - s : Embeds the shader as strings in the output file (this is the default)
  - out=[filename] : Sets the output file (The default is to use the first input file's name)
  - name=[string] : Sets the name of the shader (This will be the name of the output class)
  - [filename] : One of the files to compile as a shader stage (The stage of the shader is inferred from the extension)
  - vert=[filename] : Compiles the file as a vertex shader
  - frag=[filename] : Compiles the file as a fragment shader
  - geom=[filename] : Compiles the file as a geometry shader
  - tessEval=[filename] : Compiles the file as a tesselation evaluation shader
  - tessControl=[filename] : Compiles the file as a tesselation control shader
  - compute=[filename] : Compiles the file as a compute shader (This option cannot be specified with any of the other file types)
  - namespace=[string] : Sets the namespace of the shader (The default is 'Shaders')
  - contextVersion=[version] : Set the OpenGL context version. The minimum and default versions are 3.0."""

STAGE_FLAGS: dict[str, StageKind] = {
    "vert": StageKind.VERTEX,
    "frag": StageKind.FRAGMENT,
    "geom": StageKind.GEOMETRY,
    "tessEval": StageKind.TESS_EVAL,
    "tessControl": StageKind.TESS_CONTROL,
    "compute": StageKind.COMPUTE,
}

# Compared case-insensitively
STAGE_EXTENSIONS: dict[str, StageKind] = {
    ".vert": StageKind.VERTEX,
    ".frag": StageKind.FRAGMENT,
    ".geom": StageKind.GEOMETRY,
    ".tesseval": StageKind.TESS_EVAL,
    ".tesscontrol": StageKind.TESS_CONTROL,
    ".compute": StageKind.COMPUTE,
    ".vs": StageKind.VERTEX,
    ".fs": StageKind.FRAGMENT,
    ".gs": StageKind.GEOMETRY,
}

_VERSION = re.compile(r"(\d+)\.(\d+)(?:\.\d+){0,2}")
_WORDS = re.compile(r"[A-Za-z0-9]+")


@dataclass(frozen=True)
class CompilerArguments:
    """Parsed command line.

    Attributes:
        stages: Stage sources in the order they were given
        output: Path of the generated module
        class_name: Name of the generated class
        namespace: Namespace recorded on the generated class
        recompile_from_file: Re-read stages from disk on every compile
        context_version: Requested OpenGL context version
    """

    stages: tuple[StageSource, ...] = ()
    output: Path | None = None
    class_name: str = "Shader"
    namespace: str = DEFAULT_NAMESPACE
    recompile_from_file: bool = False
    context_version: tuple[int, int] = DEFAULT_CONTEXT_VERSION
    warnings: tuple[str, ...] = field(default=(), compare=False)

    def generation_options(self) -> GenerationOptions:
        return GenerationOptions(
            namespace=self.namespace,
            class_name=self.class_name,
            recompile_from_file=self.recompile_from_file,
        )

    @property
    def stage_paths(self) -> list[Path]:
        return [Path(stage.path) for stage in self.stages]


def is_help_request(args: list[str]) -> bool:
    return bool(args) and args[0] in HELP_FLAGS


def trim_matching_quotes(value: str) -> str:
    """Strip one pair of enclosing double quotes."""
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return value[1:-1]
    return value


def parse_context_version(value: str) -> tuple[int, int]:
    """Parse ``major.minor`` (optionally followed by build numbers)."""
    match = _VERSION.fullmatch(value)
    if match is None:
        raise ArgParseError(value, "expected a version like 3.3")
    return int(match.group(1)), int(match.group(2))


def _is_class_name(name: str) -> bool:
    return (
        name.isidentifier()
        and not keyword.iskeyword(name)
        and name not in RESERVED_CLASS_NAMES
    )


def default_class_name(path: str) -> str:
    """PascalCase class name derived from a stage file name.

    >>> default_class_name("shaders/blur_pass.vert")
    'BlurPass'
    """
    stem = Path(path).name.split(".")[0]
    name = "".join(word[:1].upper() + word[1:] for word in _WORDS.findall(stem))
    if not _is_class_name(name):
        name = f"Shader{name}"
    return name


def stage_kind_of(path: str) -> StageKind:
    """Infer a stage kind from a file extension.

    Raises:
        ArgParseError: If the extension names no stage
    """
    for extension, kind in STAGE_EXTENSIONS.items():
        if path.lower().endswith(extension):
            return kind
    raise ArgParseError(path, "unable to determine the shader stage of the file")


def _is_flag(arg: str) -> bool:
    # Absolute POSIX paths also start with "/"
    if arg.startswith("/"):
        return not Path(trim_matching_quotes(arg)).exists()
    return arg.startswith("-")


def read_stage(path: str, kind: StageKind) -> StageSource:
    return StageSource(path=path, kind=kind, text=Path(path).read_text())


def parse_arguments(args: list[str]) -> CompilerArguments:
    """Parse the flag grammar.

    Args:
        args: Raw command line arguments, without the command name

    Returns:
        The parsed arguments. Problems with single arguments are collected in
        ``warnings`` and logged, they never abort parsing.
    """
    stages: list[StageSource] = []
    values: dict[str, object] = {}
    warnings: list[str] = []

    for arg in args:
        try:
            if _is_flag(arg):
                _parse_flag(arg, arg[1:], stages, values)
            else:
                path = trim_matching_quotes(arg)
                stages.append(read_stage(path, stage_kind_of(path)))
        except ArgParseError as e:
            warnings.append(str(e))
            logger.warning(f"{e}, argument will be ignored")
        except OSError as e:
            message = f'Error: File "{e.filename or arg}" could not be read ({e.strerror})'
            warnings.append(message)
            logger.error(message)

    if stages:
        values.setdefault("class_name", default_class_name(stages[0].path))
        values.setdefault("output", Path(stages[0].path).with_suffix(".py"))

    return CompilerArguments(stages=tuple(stages), warnings=tuple(warnings), **values)


def _parse_flag(
    arg: str, option: str, stages: list[StageSource], values: dict[str, object]
) -> None:
    if option == "r":
        values["recompile_from_file"] = True
        return
    if option == "s":
        values["recompile_from_file"] = False
        return

    key, sep, raw = option.partition("=")
    if not sep:
        raise ArgParseError(arg, "unknown argument")
    value = trim_matching_quotes(raw)

    if key in STAGE_FLAGS:
        stages.append(read_stage(value, STAGE_FLAGS[key]))
        return

    match key:
        case "out":
            values["output"] = Path(value)
        case "name":
            if not _is_class_name(value):
                raise ArgParseError(
                    arg,
                    "the shader name must be a valid identifier that the "
                    "generated module does not import",
                )
            values["class_name"] = value
        case "namespace":
            if not all(
                part.isidentifier() and not keyword.iskeyword(part)
                for part in value.split(".")
            ):
                raise ArgParseError(arg, "the namespace must be a dotted name")
            values["namespace"] = value
        case "contextVersion":
            values["context_version"] = parse_context_version(value)
        case _:
            raise ArgParseError(arg, "unknown argument")
