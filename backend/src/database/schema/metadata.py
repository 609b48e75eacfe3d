"""
Table Metadata Descriptors
==========================

Immutable, typed descriptors for what the database catalog reports about a
table. Nothing in this module talks to the database: the introspector builds
these objects once per table and every other layer only reads them.

Column keys follow MySQL's information_schema.columns.column_key values:
    ''    - not indexed as a key
    'PRI' - part of the primary key
    'UNI' - unique index
    'MUL' - non-unique index (usually a foreign key)
"""

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

PRIMARY_KEY = 'PRI'
SIMPLE_PK = 'simple'
COMPOSITE_PK = 'composite'

# Defaults treated as "no default": the column stays insertable and, when not
# nullable, mandatory.
EMPTY_DEFAULTS = ('', '0', 'NULL')

IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')
_ENUM_PATTERN = re.compile(r"^enum\((.*)\)$", re.IGNORECASE)


def is_valid_identifier(name: Any) -> bool:
    """Check that a table/column name is safe to interpolate into SQL."""
    return isinstance(name, str) and bool(IDENTIFIER_PATTERN.match(name))


@dataclass(frozen=True)
class ForeignKeyRef:
    """Target of a foreign-key column."""
    table: str
    column: str


@dataclass(frozen=True)
class ColumnMetadata:
    """
    One column as reported by the catalog.

    Attributes:
        name: Column name
        ordinal_position: 1-based position in the table
        default: Raw column default (None when the catalog reports NULL)
        is_nullable: Whether NULL is accepted
        data_type: Lower-case base type (int, varchar, enum, ...)
        column_type: Full declared type, e.g. "enum('Regular','Preferred')"
        max_length: Character maximum length for string types
        column_key: '', 'PRI', 'UNI' or 'MUL'
        pk_type: 'simple' / 'composite' for primary key columns, else None
        extra: Catalog extra attribute (auto_increment, on update ...)
        referenced_table: Referenced table when the column is a foreign key
        referenced_column: Referenced column when the column is a foreign key
    """
    name: str
    ordinal_position: int
    default: Optional[str] = None
    is_nullable: bool = True
    data_type: str = 'varchar'
    column_type: str = ''
    max_length: Optional[int] = None
    column_key: str = ''
    pk_type: Optional[str] = None
    extra: str = ''
    referenced_table: Optional[str] = None
    referenced_column: Optional[str] = None

    @property
    def is_primary_key(self) -> bool:
        return self.column_key.upper() == PRIMARY_KEY

    @property
    def is_composite_key_part(self) -> bool:
        return self.is_primary_key and self.pk_type == COMPOSITE_PK

    @property
    def is_auto_increment(self) -> bool:
        return 'auto_increment' in self.extra.lower()

    @property
    def is_enum(self) -> bool:
        return self.data_type.lower() == 'enum'

    @property
    def has_default(self) -> bool:
        """
        True when the column carries a meaningful default.

        NULL, empty and zero defaults ('0', '0.00') do not count, so
        zero-default counters and percentages stay insertable.
        """
        if self.default is None:
            return False
        value = str(self.default).strip()
        if value in EMPTY_DEFAULTS:
            return False
        try:
            return Decimal(value) != 0
        except InvalidOperation:
            return True

    @property
    def is_auto_timestamp(self) -> bool:
        """CURRENT_TIMESTAMP default or ON UPDATE CURRENT_TIMESTAMP."""
        default = str(self.default or '').lower()
        return 'current_timestamp' in default or 'on update' in self.extra.lower()

    @property
    def is_foreign_key(self) -> bool:
        return bool(self.referenced_table)

    @property
    def enum_values(self) -> Tuple[str, ...]:
        """Allowed values of an enum column, in declaration order."""
        if not self.is_enum:
            return ()
        match = _ENUM_PATTERN.match(self.column_type.strip())
        if not match:
            return ()
        return tuple(
            value.strip().strip("'\"")
            for value in match.group(1).split(',')
            if value.strip()
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> 'ColumnMetadata':
        """
        Build a descriptor from one catalog row.

        Args:
            row: Mapping with the lower-case aliases selected by the catalog query

        Returns:
            ColumnMetadata instance
        """
        max_length = row.get('character_maximum_length')
        pk_type = row.get('pk_type')
        return cls(
            name=row['column_name'],
            ordinal_position=int(row['ordinal_position']),
            default=row.get('column_default'),
            is_nullable=str(row.get('is_nullable', 'YES')).upper() == 'YES',
            data_type=str(row.get('data_type') or '').lower(),
            column_type=str(row.get('column_type') or ''),
            max_length=int(max_length) if max_length is not None else None,
            column_key=str(row.get('column_key') or ''),
            pk_type=pk_type.lower() if pk_type else None,
            extra=str(row.get('extra') or ''),
            referenced_table=row.get('referenced_table_name') or None,
            referenced_column=row.get('referenced_column_name') or None,
        )


@dataclass(frozen=True)
class TableMetadata:
    """Ordered column descriptors of one table."""
    name: str
    columns: Tuple[ColumnMetadata, ...]

    @property
    def column_names(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def has_column(self, name: str) -> bool:
        return any(column.name == name for column in self.columns)

    def column(self, name: str) -> ColumnMetadata:
        for column in self.columns:
            if column.name == name:
                return column
        raise KeyError(name)

    @property
    def primary_key(self) -> Tuple[str, ...]:
        return tuple(column.name for column in self.columns if column.is_primary_key)

    @property
    def has_composite_key(self) -> bool:
        return len(self.primary_key) > 1


@dataclass(frozen=True)
class ColumnClassification:
    """
    Column subsets derived from a table's metadata.

    foreign_keys is a read-only mapping of column name -> ForeignKeyRef.
    """
    fillable: Tuple[str, ...]
    updatable: Tuple[str, ...]
    mandatory: Tuple[str, ...]
    foreign_keys: Mapping[str, ForeignKeyRef] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self):
        if not isinstance(self.foreign_keys, MappingProxyType):
            object.__setattr__(self, 'foreign_keys', MappingProxyType(dict(self.foreign_keys)))


@dataclass(frozen=True)
class TableSchema:
    """Cache entry: a table's metadata together with its classification."""
    metadata: TableMetadata
    classification: ColumnClassification

    @property
    def name(self) -> str:
        return self.metadata.name

    def enum_columns(self) -> Dict[str, Tuple[str, ...]]:
        return {
            column.name: column.enum_values
            for column in self.metadata.columns
            if column.is_enum
        }
