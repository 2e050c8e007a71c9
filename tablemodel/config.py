"""
Configuration for tablemodel.

Models read their settings once, at construction, from a ModelConfig. The
config can be built directly or from the flat dotted-key mapping an
application configuration container exposes (``database.autoTable`` etc.).
"""

from enum import Enum, IntEnum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


class TableNameStyle(IntEnum):
    """Casing applied to automatically resolved table names."""

    CAMEL_UCFIRST = 1
    CAMEL_LCFIRST = 2
    UNDERSCORE = 3
    UPPERCASE = 4
    LOWERCASE = 5


class SoftDeleteValue(str, Enum):
    """Kind of value written to the soft delete column."""

    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"


class SoftDeleteConfig(BaseModel):
    """
    Soft delete settings of a model.

    When enabled, deleting through the model updates ``column`` instead of
    removing rows. The column receives True for BOOLEAN and the database's
    current timestamp for TIMESTAMP.
    """

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    column: str = ""
    value: SoftDeleteValue = SoftDeleteValue.BOOLEAN


class ModelConfig(BaseModel):
    """
    Settings shared by all models of an application.

    Example:
        >>> config = ModelConfig.from_mapping({
        ...     "database.autoTable": True,
        ...     "database.pluralizeTableName": True,
        ...     "database.tableNameStyle": TableNameStyle.UNDERSCORE,
        ...     "database.softDelete": {"enabled": True, "column": "deleted_at", "value": "timestamp"},
        ... })
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    auto_table: bool = Field(True, alias="autoTable")
    pluralize_table_name: bool = Field(False, alias="pluralizeTableName")
    table_name_style: Optional[TableNameStyle] = Field(None, alias="tableNameStyle")
    soft_delete: SoftDeleteConfig = Field(default_factory=SoftDeleteConfig, alias="softDelete")
    class_namespace: str = Field("", alias="classNamespace")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any], prefix: str = "database.") -> "ModelConfig":
        """
        Build a config from a flat dotted-key mapping.

        Only keys starting with ``prefix`` are read, missing keys fall back
        to defaults.

        Args:
            config: Mapping such as {"database.autoTable": True}
            prefix: Key prefix of the model settings
        """
        values = {
            key[len(prefix):]: value
            for key, value in config.items()
            if key.startswith(prefix)
        }
        return cls.model_validate(values)
