from django.utils.text import slugify


def slug_base(value: str) -> str:
    """Lowercase, whitespace-to-hyphen slug of a display name."""
    return slugify(value.strip()) or "item"


def unique_slug(model, base: str, field: str = "slug", exclude_pk=None) -> str:
    """Return ``base`` or ``base-1``, ``base-2``, ... whichever is free on ``model.field``.

    ``exclude_pk`` skips the row being renamed so it does not collide with itself.
    """
    queryset = model._default_manager.all()
    if exclude_pk is not None:
        queryset = queryset.exclude(pk=exclude_pk)

    candidate = base
    counter = 1
    while queryset.filter(**{field: candidate}).exists():
        candidate = f"{base}-{counter}"
        counter += 1
    return candidate
