"""Active uniform and attribute enumeration of a linked program."""

from loguru import logger

from glslwrap.compiler.models import AttributeDescriptor, UniformDescriptor
from glslwrap.gl.backend import GLBackend

# Name buffer size requested from the driver. Longer names come back
# truncated and are used as-is.
MAX_NAME_LENGTH = 512


class Introspector:
    """Reads the active variables of a linked program in native order."""

    def __init__(self, backend: GLBackend, max_name_length: int = MAX_NAME_LENGTH):
        self.backend = backend
        self.max_name_length = max_name_length

    def introspect(
        self, program: int
    ) -> tuple[list[UniformDescriptor], list[AttributeDescriptor]]:
        """Enumerate active attributes, then active uniforms.

        Args:
            program: Handle of a successfully linked program

        Returns:
            Uniform descriptors and attribute descriptors, both in the order
            the driver reports them
        """
        attributes = [
            AttributeDescriptor(name, tag)
            for name, tag in self._enumerate(
                self.backend.active_attribute_count, self.backend.active_attribute, program
            )
        ]
        uniforms = [
            UniformDescriptor(name, tag)
            for name, tag in self._enumerate(
                self.backend.active_uniform_count, self.backend.active_uniform, program
            )
        ]
        logger.info(
            f"Program {program}: {len(uniforms)} active uniform(s), "
            f"{len(attributes)} active attribute(s)"
        )
        return uniforms, attributes

    def _enumerate(self, count, describe, program: int) -> list[tuple[str, int]]:
        return [
            describe(program, index, self.max_name_length)
            for index in range(count(program))
        ]
