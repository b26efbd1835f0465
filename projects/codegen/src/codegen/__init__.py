"""Data-access code generation module for modelgen."""

from codegen.assembly import Field, TableModel, assemble
from codegen.main import ModuleNameError, generate_models, render_models
from codegen.rendering import TemplateRenderError, render, render_support_files
from codegen.type_mapping import (
    MappedType,
    UnrecognizedTypeError,
    dependency_for,
    map_type,
)

__all__ = [
    "Field",
    "MappedType",
    "ModuleNameError",
    "TableModel",
    "TemplateRenderError",
    "UnrecognizedTypeError",
    "assemble",
    "dependency_for",
    "generate_models",
    "map_type",
    "render",
    "render_models",
    "render_support_files",
]
