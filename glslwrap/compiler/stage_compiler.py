"""Compile shader stages and link them into one program."""

import re

from loguru import logger

from glslwrap.compiler.models import (
    CompileOutcome,
    StageKind,
    StageOutcome,
    StageSource,
)
from glslwrap.errors import MixedStageKindError
from glslwrap.gl.backend import GLBackend

# Drivers report the source string index (always 0 here) where a file name
# would go: "0(12) : error ..." or "0:12(5): error ...".
_SOURCE_PREFIX = re.compile(r"(^|\s)0(?=[(:]\d)", re.MULTILINE)


def attribute_log(log: str, path: str) -> str:
    """Replace the native source index prefix of a diagnostic with ``path``."""
    return _SOURCE_PREFIX.sub(lambda match: match.group(1) + path, log)


class StageCompiler:
    """Compiles a list of stages into a single program.

    Every stage is compiled and attached even after an earlier one failed so
    that all diagnostics are collected in one pass. Linking only happens when
    every stage compiled.
    """

    def __init__(self, backend: GLBackend):
        self.backend = backend

    def compile(self, stages: list[StageSource]) -> CompileOutcome:
        """Compile and link ``stages``.

        Args:
            stages: Stage sources in attach order

        Returns:
            The compile outcome. Its ``program`` handle belongs to the caller,
            who must delete it once the diagnostics have been read.

        Raises:
            ValueError: If ``stages`` is empty
            MixedStageKindError: If compute and non-compute stages are mixed.
                No native handle outlives the call in that case.
        """
        if not stages:
            raise ValueError("At least one shader stage is required")

        backend = self.backend
        program = backend.create_program()
        outcome = CompileOutcome(program=program)
        handles: list[int] = []
        attached: list[int] = []

        try:
            previous: StageKind | None = None
            for stage in stages:
                if previous is not None and (
                    (previous == StageKind.COMPUTE) != (stage.kind == StageKind.COMPUTE)
                ):
                    raise MixedStageKindError(previous, stage.kind)
                previous = stage.kind

                outcome.stages.append(
                    self._compile_stage(program, stage, handles, attached)
                )

            if outcome.compiled:
                backend.link_program(program)
                outcome.linked = backend.link_status(program)
                outcome.link_log = backend.program_info_log(program)
            else:
                logger.error(
                    f"{len(outcome.failures)} of {len(stages)} stage(s) failed to "
                    "compile, skipping link"
                )
        except BaseException:
            self._release_stages(program, handles, attached)
            backend.delete_program(program)
            raise

        self._release_stages(program, handles, attached)
        return outcome

    def _compile_stage(
        self, program: int, stage: StageSource, handles: list[int], attached: list[int]
    ) -> StageOutcome:
        backend = self.backend
        shader = backend.create_shader(stage.kind)
        handles.append(shader)

        backend.shader_source(shader, stage.text)
        backend.compile_shader(shader)
        backend.attach_shader(program, shader)
        attached.append(shader)

        succeeded = backend.compile_status(shader)
        log = attribute_log(backend.shader_info_log(shader), stage.path)
        if succeeded:
            logger.info(f"Compiled {stage.kind.stem} stage {stage.path}")
        else:
            logger.error(f"Shader failed to compile. Info log:\n{log}")
        return StageOutcome(stage=stage, succeeded=succeeded, diagnostic_log=log)

    def _release_stages(
        self, program: int, handles: list[int], attached: list[int]
    ) -> None:
        for shader in handles:
            if shader in attached:
                self.backend.detach_shader(program, shader)
            self.backend.delete_shader(shader)
        handles.clear()
        attached.clear()
