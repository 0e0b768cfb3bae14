"""Code emitter that generates a Python wrapper module from a linked program.

The emitter works in two passes. :meth:`CodeEmitter.prepare` resolves every
uniform's logical type, derives the Python identifiers of uniforms,
attributes and stages, and assigns texture units; it is the only step that
can fail. :meth:`CodeEmitter.emit` then writes the module from that plan
without consulting anything else, so equal inputs always produce
byte-identical text.
"""

import re
from dataclasses import dataclass

from glslwrap import __version__
from glslwrap.compiler import type_mapper
from glslwrap.compiler.code_block import CodeBlock
from glslwrap.compiler.models import StageSource, WrapperSpec
from glslwrap.compiler.type_mapper import LogicalType, TypeKind

TOOL_NAME = "glslwrap"

_NON_WORD = re.compile(r"\W", re.ASCII)


@dataclass(frozen=True)
class UniformPlan:
    """A uniform as it appears in the generated class.

    Attributes:
        name: GLSL name, used for location lookup and as dispatch key
        identifier: Python identifier behind ``_loc_`` and ``uniform_``
        logical_type: Resolved logical type
        texture_unit: Texture unit of sampler uniforms, ``None`` otherwise
    """

    name: str
    identifier: str
    logical_type: LogicalType
    texture_unit: int | None = None


@dataclass(frozen=True)
class AttributePlan:
    name: str
    identifier: str


@dataclass(frozen=True)
class StagePlan:
    stage: StageSource
    identifier: str


@dataclass(frozen=True)
class EmissionPlan:
    """Everything :meth:`CodeEmitter.emit` writes, fully resolved."""

    spec: WrapperSpec
    uniforms: tuple[UniformPlan, ...]
    attributes: tuple[AttributePlan, ...]
    stages: tuple[StagePlan, ...]

    @property
    def textures(self) -> tuple[UniformPlan, ...]:
        return tuple(u for u in self.uniforms if u.texture_unit is not None)

    @property
    def uses_numpy(self) -> bool:
        return any(
            u.logical_type.kind in (TypeKind.VECTOR, TypeKind.MATRIX)
            for u in self.uniforms
        )


def python_identifier(name: str) -> str:
    """Replace every character that cannot appear in an identifier with ``_``."""
    return _NON_WORD.sub("_", name)


def _unique(base: str, taken: set[str]) -> str:
    identifier = base
    n = 2
    while identifier in taken:
        identifier = f"{base}_{n}"
        n += 1
    taken.add(identifier)
    return identifier


def _texture_enum(unit: int) -> str:
    return "GL.GL_TEXTURE0" if unit == 0 else f"GL.GL_TEXTURE0 + {unit}"


class CodeEmitter:
    """Generates the source of a wrapper module."""

    def __init__(self, tool_version: str = __version__):
        self.tool_version = tool_version

    def prepare(self, spec: WrapperSpec) -> EmissionPlan:
        """Resolve types, identifiers and texture units of ``spec``.

        Raises:
            UnsupportedUniformType: If a uniform has an image or atomic
                counter type
        """
        taken: set[str] = set()
        uniforms: list[UniformPlan] = []
        unit = 0
        for uniform in spec.uniforms:
            logical_type = uniform.logical_type
            texture_unit = None
            if logical_type == type_mapper.TEXTURE:
                texture_unit = unit
                unit += 1
            uniforms.append(
                UniformPlan(
                    uniform.name,
                    _unique(python_identifier(uniform.name), taken),
                    logical_type,
                    texture_unit,
                )
            )

        attributes = tuple(
            AttributePlan(a.name, _unique(python_identifier(a.name), taken))
            for a in spec.attributes
        )

        stage_names: set[str] = set()
        stages = tuple(
            StagePlan(stage, _unique(stage.kind.stem, stage_names))
            for stage in spec.stages
        )

        return EmissionPlan(spec, tuple(uniforms), attributes, stages)

    def emit(self, spec: WrapperSpec) -> str:
        """Generate the complete wrapper module for ``spec``."""
        plan = self.prepare(spec)
        code = CodeBlock()
        self._emit_header(code, plan)
        code.separate(2)
        self._emit_class(code, plan)
        code.separate(2)
        name = plan.spec.options.class_name
        code.add_line(f"{name}._references = runtime.Counter({name}._release_program)")
        return code.render()

    def _emit_header(self, code: CodeBlock, plan: EmissionPlan) -> None:
        options = plan.spec.options
        code.add_lines(
            [
                "# <auto-generated>",
                f"#     This code was generated by {TOOL_NAME} {self.tool_version}.",
                "#",
                "#     Changes to this file may cause incorrect behavior and will be lost if",
                "#     the code is regenerated.",
                "# </auto-generated>",
                f'"""OpenGL shader wrapper {options.namespace}.{options.class_name}."""',
            ]
        )
        code.add_line()

        code.add_line("from collections.abc import Iterator")
        if options.recompile_from_file:
            code.add_line("from pathlib import Path")
        code.add_line()
        if plan.uses_numpy:
            code.add_line("import numpy as np")
        code.add_line("from loguru import logger")
        code.add_line()
        code.add_line("from glslwrap import runtime")
        code.add_line("from glslwrap.runtime import gl as GL")
        code.add_line()
        code.add_line(f"__all__ = [{options.class_name!r}]")

    def _emit_class(self, code: CodeBlock, plan: EmissionPlan) -> None:
        options = plan.spec.options
        code.add_line(
            f"@runtime.generated_code({TOOL_NAME!r}, {self.tool_version!r}, "
            f"namespace={options.namespace!r})"
        )
        with code.block(f"class {options.class_name}(runtime.GLShader)"):
            self._emit_docstring(code, plan)
            self._emit_fields(code, plan)
            self._emit_init(code, plan)
            if options.recompile_from_file:
                self._emit_load_shaders(code, plan)
            self._emit_compile_shader(code, plan)
            self._emit_recompile(code, plan)
            self._emit_compile(code, plan)
            self._emit_set_parameter(code, plan)
            self._emit_get_parameter(code, plan)
            self._emit_get_parameter_location(code, plan)
            self._emit_pass_uniforms(code, plan)
            self._emit_use_shader(code, plan)
            self._emit_get_shader_id(code, plan)
            self._emit_dispose(code, plan)
            self._emit_support(code, plan)
            self._emit_get_uniform_names(code, plan)
            self._emit_release_program(code, plan)

    def _emit_docstring(self, code: CodeBlock, plan: EmissionPlan) -> None:
        options = plan.spec.options
        code.add_line(f'"""Shader program {options.namespace}.{options.class_name}.')
        code.add_line()
        code.add_line("Stages:")
        for stage in plan.stages:
            code.add_line(f"    {stage.identifier}: {stage.stage.kind.gl_constant}")
        if plan.uniforms:
            code.add_line("Uniforms:")
            for uniform in plan.uniforms:
                code.add_line(f"    {uniform.name}: {uniform.logical_type}")
        if plan.attributes:
            code.add_line("Attributes:")
            for attribute in plan.attributes:
                code.add_line(f"    {attribute.name}")
        code.add_line('"""')
        code.add_line()

    def _emit_fields(self, code: CodeBlock, plan: EmissionPlan) -> None:
        code.add_line("_program_id = 0")
        code.add_line("_references: runtime.Counter")
        code.add_line()

        for item in (*plan.uniforms, *plan.attributes):
            code.add_line(f"_loc_{item.identifier} = -1")
        code.add_line()

        for stage in plan.stages:
            if plan.spec.options.recompile_from_file:
                code.add_line(f"_{stage.identifier}_source: str")
            else:
                code.add_line(f"_{stage.identifier}_source = {stage.stage.text!r}")
        code.add_line()

        self._emit_mapping(
            code,
            "_UNIFORMS",
            [
                f"runtime.UniformSlot({'uniform_' + u.identifier!r}, "
                f"{type_mapper.converter_of(u.logical_type)})"
                for u in plan.uniforms
            ],
            [u.name for u in plan.uniforms],
        )
        self._emit_mapping(
            code,
            "_LOCATIONS",
            [repr(f"_loc_{item.identifier}") for item in (*plan.uniforms, *plan.attributes)],
            [item.name for item in (*plan.uniforms, *plan.attributes)],
        )
        code.add_line()

    def _emit_mapping(
        self, code: CodeBlock, name: str, values: list[str], keys: list[str]
    ) -> None:
        if not keys:
            code.add_line(f"{name} = {{}}")
            return
        code.add_line(f"{name} = {{")
        code.indent_level += 1
        for key, value in zip(keys, values):
            code.add_line(f"{key!r}: {value},")
        code.indent_level -= 1
        code.add_line("}")

    def _emit_init(self, code: CodeBlock, plan: EmissionPlan) -> None:
        with code.block("def __init__(self) -> None"):
            code.add_line(
                f"self.transpose_matrix = {plan.spec.options.default_transpose_matrix!r}"
            )
            for uniform in plan.uniforms:
                code.add_line(
                    f"self.uniform_{uniform.identifier}: "
                    f"{type_mapper.python_type_of(uniform.logical_type)} = "
                    f"{type_mapper.default_value_of(uniform.logical_type)}"
                )
        code.add_line()

    def _emit_load_shaders(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        code.add_line("@staticmethod")
        with code.block("def _load_shaders() -> None"):
            code.add_line('"""Re-read every stage from the file it was generated from."""')
            for stage in plan.stages:
                code.add_line(
                    f"{name}._{stage.identifier}_source = "
                    f"Path({stage.stage.path!r}).read_text()"
                )
        code.add_line()

    def _emit_compile_shader(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        code.add_line("@staticmethod")
        with code.block("def compile_shader() -> None"):
            code.add_line('"""Compile and link the shared program, then resolve locations."""')
            if plan.spec.options.recompile_from_file:
                code.add_line(f"{name}._load_shaders()")
            code.add_line("program = GL.glCreateProgram()")
            for stage in plan.stages:
                handle = f"{stage.identifier}_shader"
                code.add_lines(
                    [
                        f"{handle} = GL.glCreateShader(GL.{stage.stage.kind.gl_constant})",
                        f"GL.glShaderSource({handle}, {name}._{stage.identifier}_source)",
                        f"GL.glCompileShader({handle})",
                        f"GL.glAttachShader(program, {handle})",
                    ]
                )
            code.add_line("GL.glLinkProgram(program)")
            log_format = f"{plan.spec.options.namespace}.{name} link log: {{}}"
            code.add_line(
                f"logger.debug({log_format!r}, "
                "runtime.as_text(GL.glGetProgramInfoLog(program)))"
            )
            for stage in plan.stages:
                handle = f"{stage.identifier}_shader"
                code.add_line(f"GL.glDetachShader(program, {handle})")
                code.add_line(f"GL.glDeleteShader({handle})")
            code.add_line(f"{name}._program_id = program")
            for uniform in plan.uniforms:
                code.add_line(
                    f"{name}._loc_{uniform.identifier} = "
                    f"GL.glGetUniformLocation(program, {uniform.name!r})"
                )
            for attribute in plan.attributes:
                code.add_line(
                    f"{name}._loc_{attribute.identifier} = "
                    f"GL.glGetAttribLocation(program, {attribute.name!r})"
                )
        code.add_line()

    def _emit_recompile(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        with code.block("def recompile(self) -> None"):
            code.add_lines(
                [
                    '"""Delete the shared program and compile it again.',
                    "",
                    "Like :meth:`compile`, this takes another reference on the",
                    "shared program, so it stays alive until one more",
                    ":meth:`dispose` than there were :meth:`compile` calls.",
                    '"""',
                ]
            )
            code.add_line(f"GL.glDeleteProgram({name}._program_id)")
            code.add_line(f"{name}._program_id = 0")
            code.add_line("self.compile()")
        code.add_line()

    def _emit_compile(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        with code.block("def compile(self) -> None"):
            with code.block(f"if {name}._program_id == 0"):
                code.add_line(f"{name}.compile_shader()")
            code.add_line(f"{name}._references.acquire()")
        code.add_line()

    def _emit_lookup(self, code: CodeBlock, lookup: str, message: str) -> None:
        with code.block("try"):
            code.add_line(lookup)
        with code.block("except KeyError"):
            code.add_line("raise runtime.InvalidIdentifierError(")
            code.add_line(f"    {message}")
            code.add_line(") from None")

    def _emit_set_parameter(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        with code.block("def set_parameter(self, name: str, value: object) -> None"):
            self._emit_lookup(
                code,
                f"slot = {name}._UNIFORMS[name]",
                'f"There is no uniform variable named {name} in this shader."',
            )
            code.add_line("slot.store(self, name, value)")
        code.add_line()

    def _emit_get_parameter(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        with code.block(
            "def get_parameter(self, name: str, expected_type: type | None = None) -> object"
        ):
            self._emit_lookup(
                code,
                f"slot = {name}._UNIFORMS[name]",
                'f"There is no uniform variable named {name} in this shader."',
            )
            code.add_line("return slot.load(self, name, expected_type)")
        code.add_line()

    def _emit_get_parameter_location(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        with code.block("def get_parameter_location(self, name: str) -> int"):
            self._emit_lookup(
                code,
                f"field = {name}._LOCATIONS[name]",
                'f"There is no parameter named {name}."',
            )
            code.add_line(f"return getattr({name}, field)")
        code.add_line()

    def _emit_pass_uniforms(self, code: CodeBlock, plan: EmissionPlan) -> None:
        with code.block("def pass_uniforms(self) -> None"):
            for uniform in plan.uniforms:
                if uniform.texture_unit is not None:
                    code.add_line(
                        f"GL.glUniform1i(self._loc_{uniform.identifier}, "
                        f"{uniform.texture_unit})"
                    )
                else:
                    code.add_line(
                        type_mapper.draw_command_for(
                            uniform.logical_type, uniform.identifier
                        )
                    )
        code.add_line()

    def _emit_use_shader(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        with code.block("def use_shader(self) -> None"):
            code.add_line(f"GL.glUseProgram({name}._program_id)")
            for uniform in plan.textures:
                field = f"self.uniform_{uniform.identifier}"
                code.add_line(f"GL.glActiveTexture({_texture_enum(uniform.texture_unit)})")
                code.add_line(f"GL.glBindTexture({field}.target, {field}.texture_id)")
            for attribute in plan.attributes:
                code.add_line(f"GL.glEnableVertexAttribArray(self._loc_{attribute.identifier})")
        code.add_line()

    def _emit_get_shader_id(self, code: CodeBlock, plan: EmissionPlan) -> None:
        options = plan.spec.options
        name = options.class_name
        message = (
            f'The shader "{options.namespace}.{name}" has not been initialized. '
            "Call compile() on one of the instances or compile_shader() to "
            "compile the shader."
        )
        with code.block("def get_shader_id(self) -> int"):
            with code.block(f"if {name}._program_id == 0"):
                code.add_line(f"raise runtime.ShaderNotInitializedError({message!r})")
            code.add_line(f"return {name}._program_id")
        code.add_line()

    def _emit_dispose(self, code: CodeBlock, plan: EmissionPlan) -> None:
        with code.block("def dispose(self) -> None"):
            code.add_line(f"{plan.spec.options.class_name}._references.release()")
        code.add_line()

    def _emit_support(self, code: CodeBlock, plan: EmissionPlan) -> None:
        code.add_line("@property")
        with code.block("def is_supported(self) -> bool"):
            code.add_line(
                f"return {plan.spec.options.class_name}.implementation_supports_shaders()"
            )
        code.add_line()
        code.add_line("@staticmethod")
        with code.block("def implementation_supports_shaders() -> bool"):
            code.add_line("return runtime.supports_shaders()")
        code.add_line()

    def _emit_get_uniform_names(self, code: CodeBlock, plan: EmissionPlan) -> None:
        names = ", ".join(repr(u.name) for u in plan.uniforms)
        if len(plan.uniforms) == 1:
            names += ","
        with code.block("def get_uniform_names(self) -> Iterator[str]"):
            code.add_line(f"yield from ({names})")
        code.add_line()

    def _emit_release_program(self, code: CodeBlock, plan: EmissionPlan) -> None:
        name = plan.spec.options.class_name
        code.add_line("@staticmethod")
        with code.block("def _release_program() -> None"):
            code.add_line(f"GL.glDeleteProgram({name}._program_id)")
            code.add_line(f"{name}._program_id = 0")
