# slip_engine/utils/id_handler.py

import itertools
import logging
import time
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)


class IDFlex:
    """Utility class for handling flexible ID types"""

    @staticmethod
    def to_string(value: Any, prefix: str = "") -> str:
        """
        Convert any value to string ID.

        Args:
            value: Any value to convert to string
            prefix: Optional prefix to add

        Returns:
            String representation of the ID
        """
        if value is None:
            return f"{prefix}none"

        # bool is an int subclass; keep it readable
        if isinstance(value, bool):
            return f"{prefix}{str(value).lower()}"

        # Handle common numeric types
        if isinstance(value, (int, Decimal)):
            return f"{prefix}{int(value)}"
        if isinstance(value, float):
            return f"{prefix}{int(value)}" if value.is_integer() else f"{prefix}{value}"

        # Handle string types
        if isinstance(value, str):
            if value.strip() == "":
                return f"{prefix}empty"
            return f"{prefix}{value.strip()}"

        # Handle objects with ID attribute
        if hasattr(value, 'id'):
            return IDFlex.to_string(value.id, prefix)

        return f"{prefix}{str(value)}"

    @staticmethod
    def match_id(value: Any, index: int) -> str:
        """Stable match key; positional ``m-<index>`` when the caller gave none."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return f"m-{index}"
        return IDFlex.to_string(value)


class SlipIdFactory:
    """
    Issues ``<PREFIX>-<epoch_ms>-<n>`` slip identifiers.

    The timestamp is fixed when the factory is created and the sequence
    number increases by one per id, so every id issued by one factory is
    distinct.
    """

    def __init__(self, prefix: str = "SLIP", timestamp_ms: Optional[int] = None):
        self.prefix = prefix
        self.timestamp_ms = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
        self._sequence = itertools.count(1)

    def next_id(self) -> str:
        return f"{self.prefix}-{self.timestamp_ms}-{next(self._sequence)}"
