"""
Tests for model configuration.
"""

from tablemodel import ModelConfig, SoftDeleteValue, TableNameStyle


class TestModelConfig:
    """Test building configs."""

    def test_defaults(self):
        config = ModelConfig()
        assert config.auto_table is True
        assert config.pluralize_table_name is False
        assert config.table_name_style is None
        assert config.soft_delete.enabled is False
        assert config.class_namespace == ""

    def test_from_mapping(self):
        """Test that dotted keys map onto the config fields."""
        config = ModelConfig.from_mapping({
            "database.autoTable": False,
            "database.pluralizeTableName": True,
            "database.tableNameStyle": 3,
            "database.softDelete": {"enabled": True, "column": "deleted_at", "value": "timestamp"},
            "database.classNamespace": "app.models",
            "app.name": "ignored",
        })

        assert config.auto_table is False
        assert config.pluralize_table_name is True
        assert config.table_name_style is TableNameStyle.UNDERSCORE
        assert config.soft_delete.enabled is True
        assert config.soft_delete.column == "deleted_at"
        assert config.soft_delete.value is SoftDeleteValue.TIMESTAMP
        assert config.class_namespace == "app.models"

    def test_from_mapping_custom_prefix(self):
        config = ModelConfig.from_mapping({"db.autoTable": False}, prefix="db.")
        assert config.auto_table is False

    def test_from_empty_mapping(self):
        assert ModelConfig.from_mapping({}) == ModelConfig()
