"""
Soft delete policy for tablemodel models.
"""

from typing import Any, Optional

from tablemodel.config import SoftDeleteConfig, SoftDeleteValue
from tablemodel.library.builder import CURRENT_TIMESTAMP


class SoftDeletePolicy:
    """
    Decide whether a delete is rewritten into an update.

    Example:
        >>> policy = SoftDeletePolicy(SoftDeleteConfig(enabled=True, column="deleted"))
        >>> policy.apply()
        {'deleted': True}
    """

    def __init__(self, config: SoftDeleteConfig):
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def value(self) -> Any:
        """Value marking a row as deleted."""
        if self.config.value == SoftDeleteValue.TIMESTAMP:
            return CURRENT_TIMESTAMP
        return True

    def apply(self) -> Optional[dict[str, Any]]:
        """
        Get the update replacing the delete.

        Returns:
            Column update marking rows as deleted, or None when soft delete
            is disabled and rows are deleted physically
        """
        if not self.config.enabled:
            return None
        return {self.config.column: self.value()}
