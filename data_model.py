from dataclasses import dataclass, field
from typing import Any, Optional, Tuple, Union


@dataclass(frozen=True)
class PrimitiveType:
    kind: str


@dataclass(frozen=True)
class GroupType:
    kind: str  # struct | list | large_list | fixed_size_list | map
    children: Tuple["Field", ...] = ()

    @property
    def is_struct(self) -> bool:
        return self.kind == "struct"


FieldType = Union[PrimitiveType, GroupType]


@dataclass(frozen=True)
class Field:
    name: str
    type: FieldType
    nullable: bool = True

    @property
    def is_leaf(self) -> bool:
        return isinstance(self.type, PrimitiveType)

    def type_label(self) -> str:
        label = self.type.kind
        if not self.nullable:
            label += " not null"
        return label


@dataclass(frozen=True)
class Schema:
    fields: Tuple[Field, ...] = ()

    def column_paths(self) -> list[str]:
        """Display columns in flattened order.

        Struct groups are walked into (``a.b``); list and map groups stay a single
        column whose values are rendered as strings.
        """
        paths: list[str] = []
        for f in self.fields:
            _collect_columns(f, "", paths)
        return paths

    def tree_lines(self) -> list[Tuple[int, str, Field]]:
        lines: list[Tuple[int, str, Field]] = []
        for f in self.fields:
            _walk_tree(f, 0, "", lines)
        return lines

    def leaf_count(self) -> int:
        return sum(1 for _, _, f in self.tree_lines() if f.is_leaf)

    def __len__(self) -> int:
        return len(self.fields)


def _collect_columns(f: Field, prefix: str, out: list[str]):
    path = f"{prefix}{f.name}"
    if isinstance(f.type, GroupType) and f.type.is_struct and f.type.children:
        for child in f.type.children:
            _collect_columns(child, f"{path}.", out)
        return
    out.append(path)


def _walk_tree(f: Field, depth: int, prefix: str, out: list):
    path = f"{prefix}{f.name}"
    out.append((depth, path, f))
    if isinstance(f.type, GroupType):
        for child in f.type.children:
            _walk_tree(child, depth + 1, f"{path}.", out)


@dataclass(frozen=True)
class ColumnStats:
    path: str
    physical_type: str = ""
    min: Any = None
    max: Any = None
    null_count: Optional[int] = None
    distinct_count: Optional[int] = None
    compression: str = ""
    encodings: Tuple[str, ...] = ()
    compressed_size: int = 0
    uncompressed_size: int = 0


@dataclass(frozen=True)
class RowGroupMeta:
    index: int
    num_rows: int
    total_byte_size: int
    compressed_size: int = 0
    columns: Tuple[ColumnStats, ...] = ()


@dataclass(frozen=True)
class FileMetadata:
    path: str
    format_version: str
    created_by: str
    num_rows: int
    num_row_groups: int
    num_columns: int
    file_size: int
    serialized_size: int = 0
    compressed_size: int = 0
    uncompressed_size: int = 0
    encodings: Tuple[Tuple[str, int], ...] = ()
    compressions: Tuple[Tuple[str, int], ...] = ()
    key_value_metadata: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)

    @property
    def compression_ratio(self) -> Optional[float]:
        if not self.compressed_size:
            return None
        return self.uncompressed_size / self.compressed_size


@dataclass(frozen=True)
class ReadErrorCell:
    """Placeholder for a cell whose row window failed to decode."""

    message: str = ""


Row = Tuple[Any, ...]
