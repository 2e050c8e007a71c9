"""Model definitions for tablemodel."""

from tablemodel.models.base import Model
from tablemodel.models.descriptor import ModelDescriptor
from tablemodel.models.hooks import CallbackRegistry, Operation, Timing, before, after
from tablemodel.models.soft_delete import SoftDeletePolicy

__all__ = [
    "Model",
    "ModelDescriptor",
    "CallbackRegistry",
    "Operation",
    "Timing",
    "before",
    "after",
    "SoftDeletePolicy",
]
