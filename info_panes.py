"""Text builders for the Schema, Metadata and Row Groups tabs.

All functions here are pure: they turn the immutable file description into lists of
strings, which the renderer then windows and highlights.
"""

from cell_format import render_value
from data_model import Field, GroupType

MAX_VALUE_WIDTH = 60


def human_size(n: int) -> str:
    size = float(n)
    for unit in ("B", "KiB", "MiB", "GiB", "TiB"):
        if size < 1024 or unit == "TiB":
            if unit == "B":
                return f"{int(size)} {unit}"
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{n} B"


def _fit(text: str, width: int) -> str:
    if len(text) <= width:
        return text.ljust(width)
    if width <= 1:
        return text[:width]
    return text[: width - 1] + "…"


def format_columns(values, widths) -> str:
    return " ".join(_fit(str(v), w) for v, w in zip(values, widths)).rstrip()


# ---------- schema ----------


def _tree_label(depth: int, f: Field) -> str:
    marker = "▸ " if isinstance(f.type, GroupType) else "  "
    return "  " * depth + marker + f.name


def schema_header(schema) -> str:
    name_w = _schema_name_width(schema)
    return format_columns(["Field", "Type", "Nullable"], [name_w, 24, 8])


def _schema_name_width(schema) -> int:
    labels = [_tree_label(d, f) for d, _, f in schema.tree_lines()]
    return min(48, max([len("Field")] + [len(label) for label in labels]))


def schema_lines(schema) -> list[str]:
    name_w = _schema_name_width(schema)
    lines = []
    for depth, _, f in schema.tree_lines():
        lines.append(
            format_columns(
                [_tree_label(depth, f), f.type.kind, "yes" if f.nullable else "no"],
                [name_w, 24, 8],
            )
        )
    return lines


# ---------- metadata ----------


def metadata_lines(md) -> list[str]:
    ratio = md.compression_ratio
    lines = [
        f"File:               {md.path}",
        f"File size:          {human_size(md.file_size)} ({md.file_size} bytes)",
        f"Format version:     {md.format_version}",
        f"Created by:         {md.created_by or '-'}",
        f"Rows:               {md.num_rows}",
        f"Row groups:         {md.num_row_groups}",
        f"Columns:            {md.num_columns}",
        f"Footer size:        {human_size(md.serialized_size)}",
        f"Compressed data:    {human_size(md.compressed_size)}",
        f"Uncompressed data:  {human_size(md.uncompressed_size)}",
        f"Compression ratio:  {ratio:.2f}x" if ratio else "Compression ratio:  -",
        "",
        "Encodings (column chunks):",
    ]
    lines.extend(f"  {name:<22} {count}" for name, count in md.encodings)
    lines.append("")
    lines.append("Compression codecs (column chunks):")
    lines.extend(f"  {name:<22} {count}" for name, count in md.compressions)
    if md.key_value_metadata:
        lines.append("")
        lines.append("Key/value metadata:")
        for key, value in md.key_value_metadata:
            first = value.split("\n", 1)[0]
            if len(first) > MAX_VALUE_WIDTH:
                first = first[: MAX_VALUE_WIDTH - 1] + "…"
            lines.append(f"  {key}: {first}")
    return lines


# ---------- row groups ----------

ROW_GROUP_WIDTHS = [28, 12, 16, 16, 8, 10, 10]


def row_group_selector(row_groups, selected: int, width: int) -> str:
    if not row_groups:
        return "No row groups"
    rg = row_groups[selected]
    head = (
        f"Row group {selected + 1}/{len(row_groups)}  "
        f"rows={rg.num_rows}  size={human_size(rg.total_byte_size)}  "
        f"compressed={human_size(rg.compressed_size)}  "
    )
    cells = []
    for i in range(len(row_groups)):
        cells.append(f"[{i}]" if i == selected else f" {i} ")
    bar = "".join(cells)
    return (head + bar)[:width]


def row_group_header() -> str:
    return format_columns(
        ["Column", "Type", "Min", "Max", "Nulls", "Codec", "Size"], ROW_GROUP_WIDTHS
    )


def _stat_text(value) -> str:
    if value is None:
        return "-"
    return render_value(value)


def row_group_lines(row_groups, selected: int) -> list[str]:
    """Row 0 summarises the group; one row per column chunk follows."""
    if not row_groups:
        return []
    rg = row_groups[selected]
    total_rows = sum(g.num_rows for g in row_groups) or 1
    share = 100.0 * rg.num_rows / total_rows
    lines = [
        format_columns(
            [
                f"<row group {rg.index}>",
                f"{rg.num_rows} rows",
                f"{share:.1f}% of rows",
                "",
                "",
                "",
                human_size(rg.total_byte_size),
            ],
            ROW_GROUP_WIDTHS,
        )
    ]
    for col in rg.columns:
        nulls = "-" if col.null_count is None else str(col.null_count)
        lines.append(
            format_columns(
                [
                    col.path,
                    col.physical_type,
                    _stat_text(col.min),
                    _stat_text(col.max),
                    nulls,
                    col.compression,
                    human_size(col.compressed_size),
                ],
                ROW_GROUP_WIDTHS,
            )
        )
    return lines
