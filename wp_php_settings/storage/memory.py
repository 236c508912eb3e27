"""In-process option store; used in tests and for throwaway runs."""

import copy
from typing import Any

from ..core.enums import OptionScope
from .base import OptionStoreBase


class InMemoryOptionStore(OptionStoreBase):
    """Option store backed by a dict. State is lost when the process exits."""

    def __init__(self, scope: OptionScope = OptionScope.SITE):
        super().__init__(scope)
        self._data: dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        k = self.scoped_key(key)
        if k not in self._data:
            return default
        return copy.deepcopy(self._data[k])

    def set(self, key: str, value: Any) -> bool:
        self._data[self.scoped_key(key)] = copy.deepcopy(value)
        return True

    def delete(self, key: str) -> bool:
        return self._data.pop(self.scoped_key(key), None) is not None
