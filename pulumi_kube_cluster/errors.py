"""Exceptions raised while declaring cluster resources."""

from contextlib import contextmanager
from typing import Iterator


class KubeClusterError(Exception):
    """Base error for everything raised by this package."""


class ResourceError(KubeClusterError):
    """Declaring a resource (or a layer of resources) failed."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(description)

    def __str__(self) -> str:
        if self.__cause__ is not None:
            return f"{self.description}: {self.__cause__}"
        return self.description


class AddonError(ResourceError):
    """Installing a cluster add-on failed."""


@contextmanager
def wrap(description: str, error_cls: type[ResourceError] = ResourceError) -> Iterator[None]:
    """Re-raise any exception from the block as `error_cls(description)`.

    Nested blocks produce a chained message, e.g.
    "failed to add addons: failed to install istio: boom".
    """
    try:
        yield
    except Exception as e:
        raise error_cls(description) from e
