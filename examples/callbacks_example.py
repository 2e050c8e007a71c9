"""
Example demonstrating model callbacks and soft delete in tablemodel.

This example shows how to:
1. Normalize data before it is written (before create)
2. Keep an audit log (after create, after delete)
3. Soft delete rows with a database timestamp
"""

import logging
import sqlite3
from datetime import datetime

from tablemodel import (
    Model,
    ModelConfig,
    SoftDeleteConfig,
    SoftDeleteValue,
    SQLiteLibrary,
    TableNameStyle,
    after,
    before,
)


def setup_logging():
    """Set up logging configuration."""
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


class AuditLog:
    """Simple audit log for demonstration."""
    entries = []

    @classmethod
    def log(cls, action: str, table: str, detail: str = ""):
        """Log an audit entry."""
        entry = {
            "timestamp": datetime.now().isoformat(),
            "action": action,
            "table": table,
            "detail": detail,
        }
        cls.entries.append(entry)
        print(f"[AUDIT] {action} {table} {detail}")


class Customer(Model):
    """Customers, soft deleted by stamping deleted_at."""

    soft_delete = SoftDeleteConfig(enabled=True, column="deleted_at", value=SoftDeleteValue.TIMESTAMP)

    @before("create")
    def normalize_email(self, data):
        if "email" in data:
            data["email"] = data["email"].strip().lower()

    @after("create")
    def audit_create(self, data):
        AuditLog.log("create", self.table, data.get("email", ""))

    @after("delete")
    def audit_delete(self):
        AuditLog.log("delete", self.table)


def create_database() -> sqlite3.Connection:
    connection = sqlite3.connect(":memory:")
    connection.execute(
        "CREATE TABLE customers ("
        " id INTEGER PRIMARY KEY AUTOINCREMENT,"
        " name TEXT NOT NULL,"
        " email TEXT UNIQUE,"
        " deleted_at TEXT)"
    )
    return connection


def main():
    """Run the example."""
    setup_logging()

    config = ModelConfig(pluralize_table_name=True, table_name_style=TableNameStyle.UNDERSCORE)
    customers = Customer(SQLiteLibrary(create_database()), config)
    print(f"Resolved table name: {customers.table}")

    customers.create({"name": "Alice", "email": "  ALICE@example.com "})
    customers.create({"name": "Bob", "email": "bob@example.com"})

    # Duplicate email: reported through the return value, not raised
    if not customers.create({"name": "Alice again", "email": "alice@example.com"}):
        print(f"Create failed: {customers.last_error().message}")

    # Soft delete: runs UPDATE ... SET deleted_at = CURRENT_TIMESTAMP
    customers.where("email", "bob@example.com").delete()

    result = customers.where("deleted_at", None).order_by("name").select(["name", "email"])
    for row in result:
        print(f"Active customer: {row['name']} <{row['email']}>")

    print(f"Audit log entries: {len(AuditLog.entries)}")


if __name__ == "__main__":
    main()
