"""Shader compilation, introspection and wrapper generation."""

from glslwrap.compiler.emitter import CodeEmitter
from glslwrap.compiler.introspector import Introspector
from glslwrap.compiler.models import (
    AttributeDescriptor,
    CompileOutcome,
    GenerationOptions,
    StageKind,
    StageOutcome,
    StageSource,
    UniformDescriptor,
    WrapperSpec,
)
from glslwrap.compiler.pipeline import Pipeline, PipelineState
from glslwrap.compiler.stage_compiler import StageCompiler

__all__ = [
    "AttributeDescriptor",
    "CodeEmitter",
    "CompileOutcome",
    "GenerationOptions",
    "Introspector",
    "Pipeline",
    "PipelineState",
    "StageCompiler",
    "StageKind",
    "StageOutcome",
    "StageSource",
    "UniformDescriptor",
    "WrapperSpec",
]
