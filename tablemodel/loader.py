"""
Model loader for tablemodel.

Builds models by name with the dependencies shared across an application,
so callers never wire the library, config and inflector by hand.
"""

import importlib
import logging
from typing import Any, Optional

from tablemodel.config import ModelConfig
from tablemodel.library.base import Library
from tablemodel.models.base import Model
from tablemodel.naming import Inflector, InflectionInflector

logger = logging.getLogger(__name__)


class ModelLoader:
    """
    Load models from the configured namespace.

    Example:
        >>> loader = ModelLoader(library, ModelConfig(class_namespace="app.models"))
        >>> posts = loader.load("blog/Post")  # app.models.blog.Post
    """

    def __init__(
        self,
        library: Library,
        config: Optional[ModelConfig] = None,
        inflector: Optional[Inflector] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.library = library
        self.config = config or ModelConfig()
        self.inflector = inflector or InflectionInflector()
        self.logger = logger

    def resolve(self, name: str) -> type[Model]:
        """
        Resolve a model class from its name.

        Args:
            name: Class path relative to the namespace, "blog/Post" or "blog.Post"

        Raises:
            ImportError: If the module cannot be imported
            AttributeError: If the module has no such class
            TypeError: If the resolved object is not a Model subclass
        """
        path = ".".join(
            part for part in [self.config.class_namespace.strip("."), name.replace("/", ".")]
            if part
        )
        module_name, _, class_name = path.rpartition(".")
        if not module_name:
            raise ImportError(f"Model name '{name}' does not include a module")

        model_class = getattr(importlib.import_module(module_name), class_name)
        if not (isinstance(model_class, type) and issubclass(model_class, Model)):
            raise TypeError(f"{path} is not a Model subclass")
        return model_class

    def load(self, name: str, *init_args: Any) -> Model:
        """
        Instantiate a model with the shared dependencies.

        If the model defines an ``init`` method, it is called with
        ``init_args`` after construction.
        """
        model_class = self.resolve(name)
        logger.debug("Loading model %s", model_class.__qualname__)
        model = model_class(
            self.library,
            self.config,
            inflector=self.inflector,
            logger=self.logger,
        )
        init = getattr(model, "init", None)
        if callable(init):
            init(*init_args)
        return model
