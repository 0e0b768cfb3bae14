"""Native OpenGL access: context creation and the compiler's call surface."""
