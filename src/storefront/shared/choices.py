from protean.exceptions import ValidationError


def coerce_choice(enum_cls, value, field_name):
    """Convert ``value`` to ``enum_cls`` or raise a field ValidationError."""
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError({field_name: [f"'{value}' is not one of {allowed}"]}) from None
