"""Repository scans used by handlers and read models."""

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from warehousing.config import QUERY_PAGE_SIZE


def find(aggregate_cls, **filters):
    """Return every record of ``aggregate_cls`` matching ``filters``.

    Reads page by page so a result set never stops at the provider's row limit.
    """
    query = current_domain.repository_for(aggregate_cls)._dao.query
    if filters:
        query = query.filter(**filters)

    records = []
    offset = 0
    while True:
        page = query.offset(offset).limit(QUERY_PAGE_SIZE).all()
        records.extend(page.items)
        if not page.has_next or not page.items:
            return records
        offset += len(page.items)


def children_of(aggregate_cls, **parent):
    """Children of a container in display order."""
    return sorted(find(aggregate_cls, **parent), key=lambda record: (record.position or 0, str(record.id)))


def matches(record, search, *attributes):
    """Case-insensitive substring match over the given attributes."""
    if not search:
        return True
    needle = search.lower()
    return any(needle in str(getattr(record, attr) or "").lower() for attr in attributes)


def next_position(aggregate_cls, **parent):
    """Display position for a new child appended after its siblings."""
    siblings = find(aggregate_cls, **parent)
    return max((record.position or 0 for record in siblings), default=-1) + 1


def ensure_unique_code(aggregate_cls, code, exclude_id=None, **scope):
    """Codes are unique among siblings (globally for warehouses)."""
    normalized = code.strip().upper()
    for record in find(aggregate_cls, **scope):
        if record.code == normalized and str(record.id) != str(exclude_id):
            raise ValidationError({"code": [f"{aggregate_cls.__name__} code {normalized} is already in use"]})
