"""Enum base for the string choices stored on vehicles and bookings."""

from enum import Enum

from carrental.errors import ValidationError


class ChoiceEnum(Enum):
    """Enum whose values are the labels written to storage."""

    @classmethod
    def parse(cls, value):
        """
        Resolve a member from its label or its name, ignoring case.

        Raises:
            ValidationError: If nothing matches
        """
        if isinstance(value, cls):
            return value

        text = str(value).strip().lower()
        for member in cls:
            if text in (member.value.lower(), member.name.lower()):
                return member

        valid = ", ".join(member.value for member in cls)
        raise ValidationError(f"Invalid value '{value}'. Choose from: {valid}")

    @classmethod
    def labels(cls):
        return [member.value for member in cls]
