"""Compile, introspect and emit in one scoped graphics context."""

from collections.abc import Callable
from contextlib import AbstractContextManager
from enum import Enum, auto
from typing import Any

from loguru import logger

from glslwrap.compiler.emitter import CodeEmitter
from glslwrap.compiler.introspector import Introspector
from glslwrap.compiler.models import GenerationOptions, StageSource, WrapperSpec
from glslwrap.compiler.stage_compiler import StageCompiler
from glslwrap.errors import LinkError, MixedStageKindError, StageCompileError
from glslwrap.gl.backend import GLBackend


class PipelineState(Enum):
    """Progress of one pipeline run."""

    UNINITIALIZED = auto()
    STAGES_LOADED = auto()
    COMPILED = auto()
    COMPILE_FAILED = auto()
    LINKED = auto()
    LINK_FAILED = auto()
    INTROSPECTED = auto()
    EMITTED = auto()


TERMINAL_FAILURES = frozenset({PipelineState.COMPILE_FAILED, PipelineState.LINK_FAILED})


class Pipeline:
    """Sequences stage compilation, introspection and code emission.

    The graphics context is entered once around compilation and introspection
    and always exited, on success or failure. Emission runs afterwards and
    needs no context.

    Args:
        backend: Native call surface, used while the context is current
        context_factory: Returns a context manager making a context current
        emitter: Code emitter, a default :class:`CodeEmitter` if omitted
    """

    def __init__(
        self,
        backend: GLBackend,
        context_factory: Callable[[], AbstractContextManager[Any]],
        emitter: CodeEmitter | None = None,
    ):
        self.backend = backend
        self.context_factory = context_factory
        self.emitter = emitter or CodeEmitter()
        self.state = PipelineState.UNINITIALIZED
        self.spec: WrapperSpec | None = None

    def run(self, stages: list[StageSource], options: GenerationOptions) -> str:
        """Generate the wrapper module for ``stages``.

        Returns:
            The generated module source

        Raises:
            ValueError: If ``stages`` is empty
            MixedStageKindError: If compute and non-compute stages are mixed
            StageCompileError: If any stage failed to compile
            LinkError: If the program failed to link
            UnsupportedUniformType: If a uniform has an unsupported type
        """
        self.state = PipelineState.UNINITIALIZED
        self.spec = None
        if not stages:
            raise ValueError("At least one shader stage is required")
        self.state = PipelineState.STAGES_LOADED

        with self.context_factory():
            try:
                outcome = StageCompiler(self.backend).compile(stages)
            except MixedStageKindError:
                self.state = PipelineState.COMPILE_FAILED
                raise
            try:
                if not outcome.compiled:
                    self.state = PipelineState.COMPILE_FAILED
                    raise StageCompileError(outcome.failures)
                self.state = PipelineState.COMPILED

                if not outcome.linked:
                    self.state = PipelineState.LINK_FAILED
                    logger.error(f"Shader failed to link. Info log:\n{outcome.link_log}")
                    raise LinkError(outcome.link_log)
                self.state = PipelineState.LINKED

                uniforms, attributes = Introspector(self.backend).introspect(
                    outcome.program
                )
                self.state = PipelineState.INTROSPECTED
            finally:
                self.backend.delete_program(outcome.program)

        self.spec = WrapperSpec(
            options=options,
            stages=tuple(stages),
            uniforms=tuple(uniforms),
            attributes=tuple(attributes),
        )
        source = self.emitter.emit(self.spec)
        self.state = PipelineState.EMITTED
        logger.info(f"Generated {options.namespace}.{options.class_name}")
        return source
