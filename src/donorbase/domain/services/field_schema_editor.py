"""Field schema editor.

Pure operations over an event's custom field list. Every operation takes the
full current list and returns an EditResult holding the full next list to be
persisted as a whole, or a validation error. Input lists and fields are never
mutated, and ``order`` is always dense (0..n-1) in a successful result.
"""

from dataclasses import dataclass, replace
from typing import Any, Iterable

from donorbase.domain.entities import CustomField, FieldType
from donorbase.domain.services.field_id_generator import (
    FieldIdGenerator,
    default_field_id_generator,
)

MOVE_UP = "up"
MOVE_DOWN = "down"

# Attributes update_field may change
UPDATABLE_ATTRIBUTES = frozenset({"label", "required", "options"})


@dataclass
class SchemaValidationError:
    """A single schema validation error."""

    field: str
    message: str
    code: str


@dataclass
class EditResult:
    """Outcome of a schema edit.

    On failure ``fields`` is the unchanged input list and ``error`` is set.
    """

    fields: list[CustomField]
    error: SchemaValidationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class FieldSchemaEditor:
    """Add, remove, reorder and edit custom fields and their options."""

    MAX_LABEL_LENGTH = 100

    @staticmethod
    def normalize_order(fields: Iterable[CustomField]) -> list[CustomField]:
        """Sort by stored order and reassign order as 0..n-1."""
        ordered = sorted(fields, key=lambda f: f.order)
        return [f if f.order == i else replace(f, order=i) for i, f in enumerate(ordered)]

    @staticmethod
    def _fail(fields: list[CustomField], field: str, message: str, code: str) -> EditResult:
        return EditResult(
            fields=list(fields),
            error=SchemaValidationError(field=field, message=message, code=code),
        )

    @staticmethod
    def _index_of(fields: list[CustomField], field_id: str) -> int:
        for index, field in enumerate(fields):
            if field.id == field_id:
                return index
        return -1

    @classmethod
    def _check_label(cls, label: Any) -> SchemaValidationError | None:
        if not isinstance(label, str) or not label.strip():
            return SchemaValidationError(
                field="label", message="Field label is required", code="empty_label"
            )
        if len(label.strip()) > cls.MAX_LABEL_LENGTH:
            return SchemaValidationError(
                field="label",
                message=f"Field label must be at most {cls.MAX_LABEL_LENGTH} characters",
                code="label_too_long",
            )
        return None

    @staticmethod
    def _clean_options(
        options: Iterable[Any] | None,
    ) -> tuple[tuple[str, ...], SchemaValidationError | None]:
        """Trim option values and check them for emptiness and duplicates."""
        cleaned: list[str] = []
        for index, option in enumerate(options or ()):
            value = option.strip() if isinstance(option, str) else ""
            if not value:
                return (), SchemaValidationError(
                    field=f"options[{index}]",
                    message="Option value cannot be empty",
                    code="empty_option",
                )
            if value in cleaned:
                return (), SchemaValidationError(
                    field=f"options[{index}]",
                    message=f"Option '{value}' already exists",
                    code="duplicate_option",
                )
            cleaned.append(value)
        return tuple(cleaned), None

    @classmethod
    def add_field(
        cls,
        fields: list[CustomField],
        label: str,
        field_type: FieldType | str,
        required: bool = False,
        options: Iterable[str] | None = None,
        id_generator: FieldIdGenerator | None = None,
        last_field_id: int = 0,
    ) -> EditResult:
        """Append a new field at the end of the schema.

        Args:
            fields: Current field list.
            label: Display label (trimmed).
            field_type: Field type or its string value.
            required: Whether donations must provide a value.
            options: Option values, only kept for selector/radio fields.
            id_generator: Generator for the new field ID.
            last_field_id: High-water mark of the stored form; the new ID is
                greater than it so IDs of deleted fields are never reused.

        Returns:
            EditResult with the new list, or an error when the label is empty,
            the type is unknown, or a selector/radio field has no valid options.
        """
        label_error = cls._check_label(label)
        if label_error:
            return EditResult(fields=list(fields), error=label_error)

        try:
            resolved_type = FieldType(field_type)
        except ValueError:
            valid = ", ".join(t.value for t in FieldType)
            return cls._fail(
                fields,
                "fieldType",
                f"Invalid field type '{field_type}'. Valid types: {valid}",
                "invalid_field_type",
            )

        field_options: tuple[str, ...] | None = None
        if resolved_type.has_options:
            field_options, options_error = cls._clean_options(options)
            if options_error:
                return EditResult(fields=list(fields), error=options_error)
            if not field_options:
                return cls._fail(
                    fields,
                    "options",
                    "At least one option is required for selector and radio fields",
                    "empty_option_set",
                )

        current = cls.normalize_order(fields)
        generator = id_generator or default_field_id_generator
        new_field = CustomField(
            id=generator.generate((f.id for f in current), last_field_id),
            label=label.strip(),
            field_type=resolved_type,
            required=bool(required),
            options=field_options,
            order=len(current),
        )
        return EditResult(fields=current + [new_field])

    @classmethod
    def delete_field(cls, fields: list[CustomField], field_id: str) -> EditResult:
        """Remove a field and renormalize the order of the remaining ones.

        Stored donation values for the field are left as orphaned values.
        """
        current = cls.normalize_order(fields)
        if cls._index_of(current, field_id) == -1:
            return cls._fail(fields, "id", f"Field '{field_id}' not found", "field_not_found")
        remaining = [f for f in current if f.id != field_id]
        return EditResult(fields=cls.normalize_order(remaining))

    @classmethod
    def move_field(cls, fields: list[CustomField], field_id: str, direction: str) -> EditResult:
        """Swap a field with its neighbour above or below."""
        if direction not in (MOVE_UP, MOVE_DOWN):
            return cls._fail(
                fields,
                "direction",
                f"Invalid direction '{direction}'. Use 'up' or 'down'",
                "invalid_direction",
            )

        current = cls.normalize_order(fields)
        index = cls._index_of(current, field_id)
        if index == -1:
            return cls._fail(fields, "id", f"Field '{field_id}' not found", "field_not_found")

        target = index - 1 if direction == MOVE_UP else index + 1
        if target < 0 or target >= len(current):
            return cls._fail(
                fields,
                "direction",
                f"Field '{field_id}' cannot move {direction}",
                "move_out_of_bounds",
            )

        reordered = list(current)
        reordered[index], reordered[target] = reordered[target], reordered[index]
        return EditResult(
            fields=[f if f.order == i else replace(f, order=i) for i, f in enumerate(reordered)]
        )

    @classmethod
    def _option_field(
        cls, fields: list[CustomField], field_id: str
    ) -> tuple[list[CustomField], int, EditResult | None]:
        """Resolve a field that supports options, or a failed result."""
        current = cls.normalize_order(fields)
        index = cls._index_of(current, field_id)
        if index == -1:
            return current, index, cls._fail(
                fields, "id", f"Field '{field_id}' not found", "field_not_found"
            )
        if not current[index].field_type.has_options:
            return current, index, cls._fail(
                fields,
                "fieldType",
                f"Field '{current[index].label}' does not support options",
                "options_not_supported",
            )
        return current, index, None

    @classmethod
    def add_option(cls, fields: list[CustomField], field_id: str, value: str) -> EditResult:
        """Append an option to a selector/radio field."""
        current, index, failure = cls._option_field(fields, field_id)
        if failure:
            return failure

        option = value.strip() if isinstance(value, str) else ""
        if not option:
            return cls._fail(fields, "option", "Option value cannot be empty", "empty_option")

        field = current[index]
        if option in field.option_list:
            return cls._fail(
                fields, "option", f"Option '{option}' already exists", "duplicate_option"
            )

        current[index] = replace(field, options=tuple(field.option_list + [option]))
        return EditResult(fields=current)

    @classmethod
    def edit_option(
        cls, fields: list[CustomField], field_id: str, option_index: int, new_value: str
    ) -> EditResult:
        """Replace the option at a position.

        Donations that stored the previous value keep it.
        """
        current, index, failure = cls._option_field(fields, field_id)
        if failure:
            return failure

        field = current[index]
        options = field.option_list
        if option_index < 0 or option_index >= len(options):
            return cls._fail(
                fields, "optionIndex", f"Option index {option_index} not found", "option_not_found"
            )

        option = new_value.strip() if isinstance(new_value, str) else ""
        if not option:
            return cls._fail(fields, "option", "Option value cannot be empty", "empty_option")
        if option in options and options.index(option) != option_index:
            return cls._fail(
                fields, "option", f"Option '{option}' already exists", "duplicate_option"
            )

        options[option_index] = option
        current[index] = replace(field, options=tuple(options))
        return EditResult(fields=current)

    @classmethod
    def delete_option(
        cls, fields: list[CustomField], field_id: str, option_index: int
    ) -> EditResult:
        """Remove the option at a position. The field stays even with no options left."""
        current, index, failure = cls._option_field(fields, field_id)
        if failure:
            return failure

        field = current[index]
        options = field.option_list
        if option_index < 0 or option_index >= len(options):
            return cls._fail(
                fields, "optionIndex", f"Option index {option_index} not found", "option_not_found"
            )

        del options[option_index]
        current[index] = replace(field, options=tuple(options))
        return EditResult(fields=current)

    @classmethod
    def update_field(
        cls, fields: list[CustomField], field_id: str, updates: dict[str, Any]
    ) -> EditResult:
        """Merge a partial update into a field definition.

        Only ``label``, ``required`` and ``options`` (selector/radio) can be
        changed; ``id``, ``order`` and ``fieldType`` are fixed for the
        field's lifetime.
        """
        current = cls.normalize_order(fields)
        index = cls._index_of(current, field_id)
        if index == -1:
            return cls._fail(fields, "id", f"Field '{field_id}' not found", "field_not_found")

        unknown = sorted(set(updates) - UPDATABLE_ATTRIBUTES)
        if unknown:
            return cls._fail(
                fields,
                unknown[0],
                f"Attribute '{unknown[0]}' cannot be updated",
                "attribute_not_updatable",
            )

        field = current[index]
        changes: dict[str, Any] = {}

        if "label" in updates:
            label_error = cls._check_label(updates["label"])
            if label_error:
                return EditResult(fields=list(fields), error=label_error)
            changes["label"] = updates["label"].strip()

        if "required" in updates:
            changes["required"] = bool(updates["required"])

        if "options" in updates:
            if not field.field_type.has_options:
                return cls._fail(
                    fields,
                    "options",
                    f"Field '{field.label}' does not support options",
                    "options_not_supported",
                )
            options, options_error = cls._clean_options(updates["options"])
            if options_error:
                return EditResult(fields=list(fields), error=options_error)
            if not options:
                return cls._fail(
                    fields,
                    "options",
                    "At least one option is required for selector and radio fields",
                    "empty_option_set",
                )
            changes["options"] = options

        current[index] = replace(field, **changes)
        return EditResult(fields=current)
