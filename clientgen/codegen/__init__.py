"""Go client generator - renders client bindings from loaded API definitions."""

from .main import (
    GeneratorConfig,
    GeneratorContext,
    generate,
    go_type,
    render_client,
    render_model_data,
    route_expression,
)

__all__ = [
    "GeneratorConfig",
    "GeneratorContext",
    "generate",
    "go_type",
    "render_client",
    "render_model_data",
    "route_expression",
]
