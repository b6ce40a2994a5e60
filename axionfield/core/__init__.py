"""Core — boundary tracing, field sampling and conversion probability."""

from axionfield.core.boundary_tracer import BoundaryTracer
from axionfield.core.conversion_engine import ConversionProbabilityEngine
from axionfield.core.exceptions import AxionFieldError, MissingCollaboratorError
from axionfield.core.field_profile import FieldProfileSampler
from axionfield.core.field_propagation import FieldPropagation
from axionfield.core.field_sampler import (
    CompositeField,
    FieldMapVolume,
    FieldSampler,
    UniformFieldBox,
    UniformFieldCylinder,
)
from axionfield.core.medium import BufferGas, Medium, UniformMedium

__all__ = [
    "AxionFieldError",
    "BoundaryTracer",
    "BufferGas",
    "CompositeField",
    "ConversionProbabilityEngine",
    "FieldMapVolume",
    "FieldProfileSampler",
    "FieldPropagation",
    "FieldSampler",
    "Medium",
    "MissingCollaboratorError",
    "UniformFieldBox",
    "UniformFieldCylinder",
    "UniformMedium",
]
