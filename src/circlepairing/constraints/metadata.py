"""Constraints driven by participant metadata."""

# Circle Pairing
# Copyright (C) 2025  Circle Pairing developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from numbers import Number
from typing import Any, Callable, List, Optional

from circlepairing.constraints.base import ConstraintInterface
from circlepairing.exceptions import InvalidConfigurationException

# validator(values, participants, event, context) -> bool
MetadataValidator = Callable[..., bool]


def _present(values: List[Any]) -> List[Any]:
    return [v for v in values if v is not None]


class MetadataConstraint(ConstraintInterface):
    """Checks the participants' values for one metadata key.

    The validator receives the list of values (None where a participant has
    no such key) followed by the participants, the event and the context.
    """

    def __init__(
        self,
        metadata_key: str,
        validator: MetadataValidator,
        name: str = "Metadata Constraint",
    ):
        if not callable(validator):
            raise InvalidConfigurationException(
                "Validator must be callable", {"metadata_key": metadata_key}
            )
        self.metadata_key = metadata_key
        self._validator = validator
        self._name = name

    def is_satisfied(self, event, context):
        values = [p.get_metadata_value(self.metadata_key) for p in event.participants]
        return bool(self._validator(values, event.participants, event, context))

    def get_name(self):
        return self._name

    @classmethod
    def require_same_value(
        cls, metadata_key: str, name: Optional[str] = None
    ) -> "MetadataConstraint":
        return cls(
            metadata_key,
            lambda values, *_: len(set(_present(values))) <= 1,
            name or f"Same {metadata_key}",
        )

    @classmethod
    def require_different_values(
        cls, metadata_key: str, name: Optional[str] = None
    ) -> "MetadataConstraint":
        def validator(values, *_):
            present = _present(values)
            return len(set(present)) == len(present)

        return cls(metadata_key, validator, name or f"Different {metadata_key}")

    @classmethod
    def max_unique_values(
        cls, metadata_key: str, max_unique: int, name: Optional[str] = None
    ) -> "MetadataConstraint":
        if max_unique < 1:
            raise InvalidConfigurationException(
                "Max unique values must be at least 1", {"max_unique": max_unique}
            )
        return cls(
            metadata_key,
            lambda values, *_: len(set(_present(values))) <= max_unique,
            name or f"Max {max_unique} {metadata_key} types",
        )

    @classmethod
    def require_adjacent_values(
        cls, metadata_key: str, name: Optional[str] = None
    ) -> "MetadataConstraint":
        def validator(values, *_):
            numeric = [
                v for v in values if isinstance(v, Number) and not isinstance(v, bool)
            ]
            if not numeric:
                return True
            return abs(max(numeric) - min(numeric)) <= 1

        return cls(metadata_key, validator, name or f"Adjacent {metadata_key}")
