"""
SQL clause builders for partial updates and list filters.

Repositories hand these functions a dict of semantic (camelCase) field names
and get back clause text with ``$n`` positional placeholders plus the
matching parameter list. Only identifiers taken from an explicit allow-list
or predicate grammar are ever written into the SQL text; values always travel
as parameters.

Example:
    >>> clause = compile_update({"numEmployees": 5}, {"numEmployees": "num_employees"})
    >>> clause.text
    '"num_employees"=$1'
    >>> clause.next_index
    2
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from app.core.errors import BadFieldError, EmptyUpdateError, InvalidRangeError

# Predicate kinds
LOWER = "lower"
UPPER = "upper"
SUBSTRING = "substring"
FLAG = "flag"

_NO_VALUE = object()


def map_field_name(name: str, mapping: Mapping[str, str]) -> str:
    """Return the column for `name`, or `name` itself when it isn't mapped."""
    return mapping.get(name, name)


@dataclass
class CompiledClause:
    """Clause text and the parameters bound to its placeholders."""
    text: str
    values: List[Any]
    next_index: int


@dataclass
class ClauseBuilder:
    """
    Accumulates clause fragments and their parameters.

    `next_index` only advances when a value is appended, so fragments that
    carry no parameter (e.g. ``equity > 0``) never leave a gap in the
    placeholder numbering.
    """
    start: int = 1
    fragments: List[str] = field(default_factory=list)
    values: List[Any] = field(default_factory=list)

    @property
    def next_index(self) -> int:
        return self.start + len(self.values)

    def add(self, template: str, value: Any = _NO_VALUE) -> None:
        """
        Append a fragment.

        `template` holds a single ``{}`` where the placeholder goes; omit
        `value` for fragments that bind nothing.
        """
        if value is _NO_VALUE:
            self.fragments.append(template)
            return
        self.fragments.append(template.format(f"${self.next_index}"))
        self.values.append(value)

    def build(self, separator: str, prefix: str = "") -> CompiledClause:
        text = prefix + separator.join(self.fragments) if self.fragments else ""
        return CompiledClause(text=text, values=list(self.values), next_index=self.next_index)


def check_fields(fields: Iterable[str], allowed: Iterable[str]) -> None:
    """Raise BadFieldError for the first field not in `allowed`."""
    allowed = set(allowed)
    for name in fields:
        if name not in allowed:
            raise BadFieldError(name)


def compile_update(
    fields: Mapping[str, Any],
    mapping: Mapping[str, str],
    start: int = 1
) -> CompiledClause:
    """
    Build the body of an UPDATE ... SET clause.

    Fields are emitted in insertion order as ``"<column>"=$i``. Values are
    passed through untouched, so None/0/False are real updates; dropping
    them is up to the caller.

    Raises:
        EmptyUpdateError: If `fields` is empty
    """
    if not fields:
        raise EmptyUpdateError()

    builder = ClauseBuilder(start=start)
    for name, value in fields.items():
        builder.add(f'"{map_field_name(name, mapping)}"={{}}', value)
    return builder.build(", ")


@dataclass(frozen=True)
class Predicate:
    """One recognized filter key and how it compiles."""
    key: str
    column: str
    kind: str
    operator: Optional[str] = None

    def compile(self, builder: ClauseBuilder, value: Any) -> None:
        if self.kind == FLAG:
            builder.add(f"{self.column} > 0")
        elif self.kind == SUBSTRING:
            # % and _ in the value are not escaped and match as wildcards
            builder.add(f"{self.column} ILIKE {{}}", f"%{value}%")
        elif self.kind == LOWER:
            builder.add(f"{self.column} {self.operator or '>='} {{}}", value)
        elif self.kind == UPPER:
            builder.add(f"{self.column} {self.operator or '<='} {{}}", value)
        else:
            raise ValueError(f"Unknown predicate kind: {self.kind}")


def validate_ranges(criteria: Mapping[str, Any], grammar: Sequence[Predicate]) -> None:
    """
    Reject lower bounds above their upper bound on the same column.

    Only applies when both bounds are supplied (not None).
    """
    uppers: Dict[str, Predicate] = {p.column: p for p in grammar if p.kind == UPPER}
    for lower in grammar:
        if lower.kind != LOWER or lower.column not in uppers:
            continue
        upper = uppers[lower.column]
        low, high = criteria.get(lower.key), criteria.get(upper.key)
        if low is not None and high is not None and low > high:
            raise InvalidRangeError(f"{lower.key} exceeds {upper.key}")


def compile_filter(
    criteria: Mapping[str, Any],
    grammar: Sequence[Predicate],
    start: int = 1
) -> CompiledClause:
    """
    Build a WHERE clause from the truthy members of `criteria`.

    Predicates are emitted in grammar order regardless of the order of
    `criteria`; keys the grammar doesn't know are ignored. With nothing to
    filter on the clause text is empty and no values are returned.

    Raises:
        InvalidRangeError: If a lower bound exceeds its upper bound
    """
    validate_ranges(criteria, grammar)

    builder = ClauseBuilder(start=start)
    for predicate in grammar:
        value = criteria.get(predicate.key)
        if not value:
            continue
        if predicate.kind == FLAG and value is not True:
            continue
        predicate.compile(builder, value)
    return builder.build(" AND ", prefix="WHERE ")
