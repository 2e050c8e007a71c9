"""
Model descriptors.

A descriptor carries everything that distinguishes one table's model from
another, so a plain Model can serve any entity without subclassing.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tablemodel.config import SoftDeleteConfig
from tablemodel.models.hooks import CallbackRegistry


class ModelDescriptor(BaseModel):
    """
    Identity, soft delete settings and callbacks of a model.

    Attributes:
        name: Entity name, used to resolve the table name when ``table`` is
            empty. May be qualified ("app.models.User")
        table: Explicit table name
        soft_delete: Soft delete settings, None to use the configured default
        callbacks: Callbacks copied into every model built from this descriptor

    Example:
        >>> users = ModelDescriptor(name="User", soft_delete=SoftDeleteConfig(enabled=True, column="deleted"))
        >>> users.callbacks.register("create", "before", normalize_email)
        >>> model = Model(library, config, descriptor=users)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    table: str = ""
    soft_delete: Optional[SoftDeleteConfig] = None
    callbacks: CallbackRegistry = Field(default_factory=CallbackRegistry)
