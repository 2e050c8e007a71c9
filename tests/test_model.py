"""
Tests for the base model.

The database library is mocked, so these tests check what the model hands
to it and how it treats the library's answers.
"""

import logging
from unittest.mock import call

import pytest

from tablemodel import (
    Error,
    Model,
    ModelConfig,
    ModelDescriptor,
    NoDataError,
    QueryError,
    SoftDeleteConfig,
)


class Users(Model):
    """Model with a preset table name."""

    table = "Users"


class TestModelConstruction:
    """Test model construction."""

    def test_logs_initialization(self, library, config, caplog):
        """Test that construction is logged at info level."""
        with caplog.at_level(logging.INFO, logger="tablemodel"):
            Users(library, config)

        records = [r for r in caplog.records if r.message == "Model initialized successfully"]
        assert len(records) == 1
        assert records[0].model == f"{__name__}.Users"

    def test_injected_logger(self, library, config):
        """Test that an injected logger is used."""
        logger = logging.getLogger("tests.injected")
        users = Users(library, config, logger=logger)
        assert users.logger is logger

    def test_config_from_mapping(self, library):
        """Test that a dotted-key mapping is accepted as config."""
        users = Model(
            library,
            {"database.autoTable": True, "database.tableNameStyle": 5},
            descriptor=ModelDescriptor(name="app.models.Customer"),
        )
        assert users.table == "customer"

    def test_descriptor_without_subclass(self, library, config):
        """Test that a plain model built from a descriptor uses its table."""
        orders = Model(library, config, descriptor=ModelDescriptor(name="Order", table="orders"))
        orders.create({"total": 10})
        library.insert.assert_called_once_with("orders", {"total": 10})

    def test_construction_runs_no_statement(self, library, config):
        """Test that construction never talks to the library."""
        Users(library, config)
        assert library.method_calls == []


class TestCreate:
    """Test the create operation."""

    def test_create_forwards_table_and_data(self, library, config):
        """Test that create inserts the data into the model's table."""
        users = Users(library, config)
        assert users.create({"name": "Alice"}) is True
        library.insert.assert_called_once_with("Users", {"name": "Alice"})
        library.last_error.assert_not_called()

    def test_failed_create_records_error(self, library, config):
        """Test that a failed create records the library's error once."""
        library.insert.return_value = False
        users = Users(library, config)

        assert users.create({"name": "Alice"}) is False
        assert users.last_error() == library.last_error.return_value
        library.last_error.assert_called_once_with()

    def test_error_overwritten_by_next_failure(self, library, config):
        """Test that each failure replaces the recorded error."""
        library.insert.return_value = False
        library.last_error.side_effect = [Error(message="first"), Error(message="second")]
        users = Users(library, config)

        users.create({"name": "Alice"})
        users.create({"name": "Bob"})

        assert users.last_error().message == "second"

    def test_error_kept_after_success(self, library, config):
        """Test that a success does not clear the recorded error."""
        library.insert.side_effect = [False, True]
        users = Users(library, config)

        users.create({"name": "Alice"})
        users.create({"name": "Bob"})

        assert users.last_error() == library.last_error.return_value

    def test_last_error_before_failure(self, library, config):
        """Test that no error is reported before a failure."""
        assert Users(library, config).last_error() is None

    def test_validation_is_left_to_callbacks(self, library, config):
        """Test that a rejecting callback does not stop the insert."""
        users = Users(library, config)
        checks = []

        def reject_empty_names(data):
            checks.append(data["name"])
            return bool(data["name"])

        users.callbacks.register("create", "before", reject_empty_names)
        library.insert.side_effect = lambda table, data: checks.append("insert") or True

        assert users.create({"name": ""}) is True
        assert checks == ["", "insert"]
        library.insert.assert_called_once_with("Users", {"name": ""})


class TestSelect:
    """Test the select operation."""

    def test_select_returns_library_result(self, library, config):
        """Test that the library's result is passed through unchanged."""
        users = Users(library, config)
        columns = ["id", {"func": "COUNT", "col": "id", "as": "total"}]

        result = users.select(columns)

        assert result is library.select.return_value
        library.select.assert_called_once_with("Users", columns)

    def test_failed_select_records_error(self, library, config):
        """Test that a failed select records the error before raising."""
        error = Error(message="no such column: nope")
        library.select.side_effect = QueryError(error)
        users = Users(library, config)

        with pytest.raises(QueryError):
            users.select(["nope"])
        assert users.last_error() is error

    def test_no_data_propagates(self, library, config):
        """Test that a missing result set is not hidden."""
        library.select.side_effect = NoDataError("no result")
        users = Users(library, config)

        with pytest.raises(NoDataError):
            users.select(["id"])


class TestUpdateAndDelete:
    """Test the update and delete operations."""

    def test_update_uses_staged_predicates(self, library, config):
        """Test that update runs after the staged where predicates."""
        users = Users(library, config)

        assert users.where("id", 1).update({"name": "Bob"}) is True
        assert library.method_calls == [
            call.where("id", 1, "="),
            call.update("Users", {"name": "Bob"}),
        ]

    def test_failed_update_records_error(self, library, config):
        """Test that a failed update records the error."""
        library.update.return_value = False
        users = Users(library, config)

        assert users.update({"name": "Bob"}) is False
        assert users.last_error() == library.last_error.return_value

    def test_delete_without_soft_delete(self, library, config):
        """Test that delete removes rows when soft delete is disabled."""
        users = Users(library, config)

        assert users.where("id", 1).delete() is True
        library.delete.assert_called_once_with("Users")
        library.update.assert_not_called()

    def test_failed_delete_records_error(self, library, config):
        """Test that a failed delete records the error."""
        library.delete.return_value = False
        users = Users(library, config)

        assert users.delete() is False
        assert users.last_error() == library.last_error.return_value

    def test_failed_soft_delete_records_error(self, library):
        """Test that a failed soft delete records the update's error."""
        library.update.return_value = False
        config = ModelConfig(auto_table=False, soft_delete=SoftDeleteConfig(enabled=True, column="deleted"))
        users = Users(library, config)

        assert users.delete() is False
        assert users.last_error() == library.last_error.return_value


class TestQueryBuilding:
    """Test the chained query building methods."""

    def test_methods_return_model(self, library, config):
        """Test that every query building method returns the model."""
        users = Users(library, config)
        chained = (
            users.where("age", 18, ">=")
            .or_where("role", "admin")
            .group_where(lambda b: b.where("a", 1))
            .or_group_where(lambda b: b.where("b", 2))
            .nested_where("id", lambda b: b.select("orders", ["user_id"]))
            .or_nested_where("id", lambda b: b.select("admins", ["user_id"]), "NOT IN")
            .join("orders")
            .join_cond("id", "user_id")
            .or_join_cond("id", "buyer_id")
            .join_cols(["total"])
            .left_join("profiles")
            .right_join("groups")
            .full_join("teams")
            .cross_join("regions")
            .group_by("role")
            .order_by("name", "DESC", "LOWER")
            .limit(10, 20)
        )
        assert chained is users

    def test_arguments_forwarded(self, library, config):
        """Test that arguments reach the library unchanged."""
        users = Users(library, config)

        def predicates(b):
            return b.where("a", 1)

        def nested(b):
            return b.select("orders", ["user_id"])

        (
            users.where("age", 18, ">=")
            .or_where("role", "admin")
            .group_where(predicates)
            .or_group_where(predicates)
            .nested_where("id", nested)
            .or_nested_where("id", nested, "NOT IN")
            .join("orders", "LEFT JOIN")
            .left_join("profiles")
            .cross_join("regions")
            .join_cond("id", "user_id", "<>")
            .or_join_cond("id", "buyer_id")
            .join_cols(["total"])
            .group_by("role")
            .order_by("name", "DESC", "LOWER")
            .limit(10, 20)
        )

        assert library.method_calls == [
            call.where("age", 18, ">="),
            call.where("role", "admin", "=", "OR"),
            call.group_where(predicates),
            call.group_where(predicates, "OR"),
            call.nested_where("id", nested, "IN"),
            call.nested_where("id", nested, "NOT IN", "OR"),
            call.join("orders", "LEFT JOIN"),
            call.join("profiles", "LEFT OUTER JOIN"),
            call.join("regions", "CROSS JOIN"),
            call.join_cond("id", "user_id", "<>"),
            call.or_join_cond("id", "buyer_id", "="),
            call.join_cols(["total"]),
            call.group_by("role"),
            call.order_by("name", "DESC", "LOWER"),
            call.limit(10, 20),
        ]

    def test_query_building_runs_nothing(self, library, config):
        """Test that staging a query never executes it or runs callbacks."""
        users = Users(library, config)
        calls = []
        for operation in ("create", "select", "update", "delete"):
            users.callbacks.register(operation, "before", lambda *args: calls.append(args))
            users.callbacks.register(operation, "after", lambda *args: calls.append(args))

        users.where("id", 1).order_by("name").limit(1).join("orders").join_cond("id", "user_id")

        assert calls == []
        for method in ("insert", "select", "update", "delete", "execute", "fetch"):
            getattr(library, method).assert_not_called()


class TestEndToEnd:
    """Scenario from construction to insert."""

    def test_preset_table_with_rejecting_callback(self, library):
        """Test one callback invocation followed by the insert."""
        users = Users(library, ModelConfig(auto_table=True))
        assert users.table == "Users"

        invocations = []

        def reject_empty_name(data):
            invocations.append(dict(data))
            if not data.get("name"):
                return False

        users.callbacks.register("create", "before", reject_empty_name)

        assert users.create({"name": ""}) is True
        assert invocations == [{"name": ""}]
        library.insert.assert_called_once_with("Users", {"name": ""})
