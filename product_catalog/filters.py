# product_catalog/filters.py

"""
Filter composition for product search.

Search filters are first collected as an ordered list of conjuncts by a pure
function, then rendered once into a single SQLAlchemy WHERE clause. Values
are always carried as bound parameters, in the order the conjuncts appear.
"""

from decimal import Decimal
from typing import List, NamedTuple, Optional

from sqlalchemy import and_, true

from .models import column_for


class Conjunct(NamedTuple):
    field: str
    operator: str
    value: object


_OPERATORS = {
    "=": lambda column, value: column == value,
    ">=": lambda column, value: column >= value,
    "<=": lambda column, value: column <= value,
    "LIKE": lambda column, value: column.like(value),
}


def build_conjuncts(
    category_id: Optional[int] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
    color: Optional[str] = None,
) -> List[Conjunct]:
    """
    Collect the conjuncts for the given filters, skipping absent ones.

    The order is fixed: category, minimum price, maximum price, color.
    A color is only used when it is non-blank; it is trimmed and matched
    as a substring.
    """
    conjuncts = []
    if category_id is not None:
        conjuncts.append(Conjunct("category_id", "=", category_id))
    if min_price is not None:
        conjuncts.append(Conjunct("price", ">=", min_price))
    if max_price is not None:
        conjuncts.append(Conjunct("price", "<=", max_price))
    if color is not None and color.strip():
        conjuncts.append(Conjunct("color", "LIKE", f"%{color.strip()}%"))
    return conjuncts


def render(conjuncts: List[Conjunct]):
    """Render conjuncts into one AND-ed clause seeded with an always-true predicate."""
    clauses = []
    for conjunct in conjuncts:
        try:
            compare = _OPERATORS[conjunct.operator]
        except KeyError:
            raise ValueError(f"Unsupported filter operator: {conjunct.operator!r}") from None
        clauses.append(compare(column_for(conjunct.field), conjunct.value))
    return and_(true(), *clauses)
