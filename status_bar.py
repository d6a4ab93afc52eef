import os

TAB_HINTS = {
    "Visualize": "/ search  v detail  arrows move  Tab next tab  Ctrl+X quit",
    "Schema": "arrows move  Tab next tab  Ctrl+X quit",
    "Metadata": "arrows move  Tab next tab  Ctrl+X quit",
    "Row Groups": "left/right group  up/down column  Tab next tab  Ctrl+X quit",
    "SQL": "Enter run  Ctrl+P/N history  Ctrl+V detail  Esc clear  Ctrl+X quit",
}


def render_status(context, width):
    """
    context keys: tab, mode, status_msg, search_buffer, filter_query, filter_count,
                  total_rows, query_running, file_path
    """
    mode = context.get("mode", "normal")
    if mode == "search":
        text = f" Search: {context.get('search_buffer', '')}|  Enter=filter, Esc=cancel"
        return text.ljust(width)[:width]
    if mode == "detail":
        text = " Row detail | arrows scroll  PgUp/PgDn page  Esc/q close"
        return text.ljust(width)[:width]

    if context.get("status_msg"):
        text = f" {context['status_msg']}"
        return text.ljust(width)[:width]

    tab = context.get("tab", "Visualize")
    parts = []
    fname = context.get("file_path") or ""
    if fname:
        parts.append(os.path.basename(fname))
    if tab == "Visualize" and context.get("filter_query"):
        parts.append(
            f"{context.get('filter_count', 0)} rows filtered (Esc to show all)"
        )
    elif tab == "Visualize":
        parts.append(f"{context.get('total_rows', 0)} rows")
    if context.get("query_running"):
        parts.append("query running…")
    parts.append(TAB_HINTS.get(tab, ""))
    text = " " + " | ".join(p for p in parts if p)
    return text.ljust(width)[:width]
