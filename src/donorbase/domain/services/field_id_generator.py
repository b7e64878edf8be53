"""Custom field ID generator.

Field IDs are millisecond timestamps rendered as decimal strings, the same
format already stored for existing schemas. A new ID is always strictly
greater than every numeric ID currently in the schema and than the form's
high-water mark, the largest ID the form has ever held. A deleted field's ID
therefore never comes back, even when a field is added within the same
millisecond or after a clock step back.
"""

import time
from typing import Callable, Iterable

from donorbase.domain.entities import highest_numeric_id


class FieldIdGenerator:
    """Generator for time-derived custom field IDs.

    Example IDs: 1735640000000, 1735640000001
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        """Initialize the generator.

        Args:
            clock: Callable returning the current time in seconds. Defaults to
                ``time.time``; tests pass a fixed clock.
        """
        self._clock = clock or time.time

    def generate(self, existing_ids: Iterable[str] | None = None, last_field_id: int = 0) -> str:
        """Generate a new field ID.

        Args:
            existing_ids: IDs currently present in the schema.
            last_field_id: Largest ID ever stored in the schema, including
                IDs of fields deleted since.

        Returns:
            A decimal string greater than every numeric existing ID and than
            last_field_id.
        """
        floor = max(highest_numeric_id(existing_ids or ()), last_field_id or 0)
        candidate = int(self._clock() * 1000)
        return str(max(candidate, floor + 1))


default_field_id_generator = FieldIdGenerator()
