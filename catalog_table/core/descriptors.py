"""Column and filter descriptors supplied by each calling view."""

import math
from dataclasses import dataclass, field
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

from .errors import DescriptorError

ALIGN_LEFT = "left"
ALIGN_CENTER = "center"
ALIGN_RIGHT = "right"
ALIGNMENTS = (ALIGN_LEFT, ALIGN_CENTER, ALIGN_RIGHT)

FILTER_SELECT = "select"
FILTER_SEARCH = "search"
FILTER_KINDS = (FILTER_SELECT, FILTER_SEARCH)

Renderer = Callable[[Any, Any], Any]
MobileRenderer = Callable[[Any], Any]
Accessor = Callable[[Any], Any]


def get_field(record: Any, key: str) -> Any:
    """
    Look up a field on a record of any shape.

    Mappings are read by key, other objects by attribute. Missing fields
    read as None.

    Args:
        record: A mapping or an arbitrary object
        key: Field name

    Returns:
        The field value, or None if the record has no such field
    """
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def title_from_key(key: str) -> str:
    """Derive a display title from a field name ("created_at" -> "Created At")."""
    return key.replace("_", " ").title()


def filter_text(value: Any) -> str:
    """
    Text a filter compares against its selected value.

    Missing values (None, NaN) read as '' and so never match an active
    filter. Everything else, booleans included, uses ``str``, the same
    form select options are stored in.
    """
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    Describes how to extract, label and render one column.

    Attributes:
        key: Field selector. Read from each record unless ``accessor`` is set,
            in which case it only identifies the column (e.g. for sorting).
        title: Header label
        sortable: Whether clicking the header sorts by this column
        render: Optional ``(value, record) -> content`` cell renderer
        align: One of 'left', 'center', 'right'
        width: Free-form size hint passed to the renderer
        mobile_render: Optional ``(record) -> content`` for the compact layout
        accessor: Optional ``(record) -> value`` extractor for synthetic keys
    """

    key: str
    title: str = ""
    sortable: bool = False
    render: Optional[Renderer] = field(default=None, compare=False)
    align: str = ALIGN_LEFT
    width: Optional[str] = None
    mobile_render: Optional[MobileRenderer] = field(default=None, compare=False)
    accessor: Optional[Accessor] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.key:
            raise DescriptorError("Column key must be a non-empty string")
        if self.align not in ALIGNMENTS:
            raise DescriptorError(
                f"Column '{self.key}' has invalid align '{self.align}'. "
                f"Expected one of {list(ALIGNMENTS)}"
            )
        if not self.title:
            object.__setattr__(self, "title", title_from_key(self.key))

    def extract(self, record: Any) -> Any:
        """Extract this column's value from a record."""
        if self.accessor is not None:
            return self.accessor(record)
        return get_field(record, self.key)


@dataclass(frozen=True)
class FilterDescriptor:
    """
    Describes one filter control and its effect on the record set.

    Both kinds keep a record only if the text of its value at ``key``
    equals the selected value; they differ in the control that is rendered
    (a select box for 'select', a text box for 'search').

    Attributes:
        key: Filter id, also the record field compared against
        label: Control label (and the "no selection" entry for selects)
        kind: 'select' (enumerated) or 'search' (free text)
        options: ``(value, label)`` pairs for enumerated filters
        placeholder: Placeholder text for free-text filters
        accessor: Optional ``(record) -> value`` extractor
    """

    key: str
    label: str = ""
    kind: str = FILTER_SELECT
    options: Tuple[Tuple[str, str], ...] = ()
    placeholder: Optional[str] = None
    accessor: Optional[Accessor] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.key:
            raise DescriptorError("Filter key must be a non-empty string")
        if self.kind not in FILTER_KINDS:
            raise DescriptorError(
                f"Filter '{self.key}' has invalid kind '{self.kind}'. "
                f"Expected one of {list(FILTER_KINDS)}"
            )
        options = tuple(_normalize_option(option) for option in self.options)
        object.__setattr__(self, "options", options)
        if self.kind == FILTER_SELECT and not options:
            raise DescriptorError(
                f"Select filter '{self.key}' needs at least one option"
            )
        if not self.label:
            object.__setattr__(self, "label", title_from_key(self.key))

    def extract(self, record: Any) -> Any:
        """Extract the value this filter compares against."""
        if self.accessor is not None:
            return self.accessor(record)
        return get_field(record, self.key)

    def option_label(self, value: str) -> str:
        """Return the display label of an option value (the value itself if unknown)."""
        for option_value, option_label in self.options:
            if option_value == value:
                return option_label
        return value


def _normalize_option(option: Any) -> Tuple[str, str]:
    if isinstance(option, Mapping):
        return (str(option["value"]), str(option.get("label", option["value"])))
    if isinstance(option, (tuple, list)) and len(option) == 2:
        return (str(option[0]), str(option[1]))
    return (str(option), str(option))


class FilterSet:
    """
    Ordered, key-unique collection of filter descriptors.

    Raises:
        DescriptorError: If two descriptors share a key
    """

    def __init__(self, filters: Iterable[FilterDescriptor] = ()):
        self._filters: Dict[str, FilterDescriptor] = {}
        for descriptor in filters:
            if descriptor.key in self._filters:
                raise DescriptorError(
                    f"Duplicate filter key '{descriptor.key}' in filter set"
                )
            self._filters[descriptor.key] = descriptor

    def get(self, key: str) -> Optional[FilterDescriptor]:
        return self._filters.get(key)

    def keys(self) -> List[str]:
        return list(self._filters.keys())

    def __iter__(self) -> Iterator[FilterDescriptor]:
        return iter(self._filters.values())

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, key: object) -> bool:
        return key in self._filters

    def __repr__(self) -> str:
        return f"FilterSet(keys={self.keys()})"


@dataclass(frozen=True)
class EmptyState:
    """
    Block rendered instead of rows when the current page is empty.

    ``icon`` and ``action`` are opaque to the table and handed to the
    renderer as-is (e.g. an emoji string, or a callable drawing a button).
    """

    title: str = ""
    description: Optional[str] = None
    icon: Any = None
    action: Any = None


def columns_from_definitions(
    definitions: Sequence[Mapping[str, Any]],
) -> List[ColumnDescriptor]:
    """
    Build column descriptors from plain dicts.

    Accepts both this package's keys (``key``, ``align``) and the
    Tabulator-style keys used by column definition dicts elsewhere
    (``field``, ``hozAlign``). A ``sorter`` entry implies ``sortable``.

    Args:
        definitions: List of column definition dicts

    Returns:
        List of ColumnDescriptor
    """
    columns = []
    for definition in definitions:
        key = definition.get("key", definition.get("field"))
        if not key:
            raise DescriptorError(
                f"Column definition needs a 'key' or 'field': {dict(definition)}"
            )
        columns.append(
            ColumnDescriptor(
                key=key,
                title=definition.get("title", ""),
                sortable=bool(
                    definition.get("sortable", definition.get("sorter") is not None)
                ),
                render=definition.get("render"),
                align=definition.get("align", definition.get("hozAlign", ALIGN_LEFT)),
                width=definition.get("width"),
                mobile_render=definition.get("mobile_render"),
                accessor=definition.get("accessor"),
            )
        )
    return columns


def columns_from_schema(
    names: Iterable[str], numeric: Iterable[str] = ()
) -> List[ColumnDescriptor]:
    """
    Auto-generate sortable columns for undeclared record fields.

    Args:
        names: Field names in display order
        numeric: Field names to right-align

    Returns:
        List of ColumnDescriptor
    """
    numeric_names = set(numeric)
    return [
        ColumnDescriptor(
            key=name,
            sortable=True,
            align=ALIGN_RIGHT if name in numeric_names else ALIGN_LEFT,
        )
        for name in names
    ]
