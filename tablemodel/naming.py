"""
Table name resolution for tablemodel.

Derives a table name from a model's type name, optionally pluralized and
put into one of the TableNameStyle casings.
"""

import re
from typing import Optional, Protocol

import inflection

from tablemodel.config import TableNameStyle


class Inflector(Protocol):
    """Word inflection service used to build table names."""

    def pluralize(self, word: str) -> str: ...

    def camelize(self, word: str, uppercase_first_letter: bool = True) -> str: ...

    def underscore(self, word: str) -> str: ...


class InflectionInflector:
    """Inflector backed by the ``inflection`` package."""

    def pluralize(self, word: str) -> str:
        return inflection.pluralize(word)

    def camelize(self, word: str, uppercase_first_letter: bool = True) -> str:
        return inflection.camelize(word, uppercase_first_letter)

    def underscore(self, word: str) -> str:
        return inflection.underscore(word)


class TableNameResolver:
    """
    Resolve table names from type names.

    Example:
        >>> resolver = TableNameResolver(InflectionInflector())
        >>> resolver.resolve("app.models.BlogPost", True, TableNameStyle.UNDERSCORE)
        'blog_posts'
    """

    def __init__(self, inflector: Inflector):
        self.inflector = inflector

    def resolve(
        self,
        type_name: str,
        pluralize: bool = False,
        style: Optional[TableNameStyle] = None,
    ) -> str:
        """
        Resolve the table name of a type.

        Args:
            type_name: Type name, optionally qualified by a module or namespace
            pluralize: Pluralize the bare name
            style: Casing to apply, None keeps the name as it is

        Returns:
            The table name
        """
        # Keep only the terminal segment of "pkg.module.Name" or "Ns\\Name"
        name = re.split(r"[.\\]", type_name)[-1]

        if pluralize:
            name = self.inflector.pluralize(name)

        if style == TableNameStyle.CAMEL_UCFIRST:
            name = self.inflector.camelize(name, True)
        elif style == TableNameStyle.CAMEL_LCFIRST:
            name = self.inflector.camelize(name, False)
        elif style == TableNameStyle.UNDERSCORE:
            name = self.inflector.underscore(name)
        elif style == TableNameStyle.UPPERCASE:
            name = name.upper()
        elif style == TableNameStyle.LOWERCASE:
            name = name.lower()

        return name
