"""Query Template Surgery — merges a search predicate into a SQL-shaped template.

Invariants:
    - Every function here is PURE string manipulation (no parsing, no DB)
    - merge_where injects after the FIRST exact-case "WHERE " only; the rest of the
      template is preserved verbatim
    - WHERE detection is a case-insensitive substring test, so "WHERE" inside a
      string literal or an identifier counts as a clause (known false positive)

Design Decisions:
    - Literal substring search over a SQL parser: saved filter templates depend
      on this exact behavior, quirks included
    - Isolated from the service so the quirks are unit-testable on their own
"""

WHERE_TOKEN = "WHERE"
INJECTION_POINT = "WHERE "


def has_where(template: str) -> bool:
    """True if the template mentions WHERE anywhere, in any letter case."""
    return WHERE_TOKEN in template.upper()


def merge_where(template: str, predicate: str | None) -> str:
    """Combine `template` with `predicate`.

    - no predicate: template returned unchanged
    - no WHERE in template: " WHERE <predicate>" appended
    - WHERE present: "WHERE <predicate> AND <original condition>"
    """
    if not predicate:
        return template
    if not has_where(template):
        return f"{template} WHERE {predicate}"
    return template.replace(
        INJECTION_POINT, f"{INJECTION_POINT}{predicate} AND ", 1,
    )


def is_full_select(template: str) -> bool:
    """True if the template is a complete SELECT statement rather than a clause suffix."""
    head = template.lstrip().split(None, 1)
    return bool(head) and head[0].upper() == "SELECT"


def build_templated_query(columns: list[str], table: str, template: str) -> str:
    """Expand a clause-suffix template into "SELECT <columns> FROM <table> <template>".

    Full SELECT templates are returned as-is.
    """
    if is_full_select(template):
        return template
    return f"SELECT {', '.join(columns)} FROM {table} {template}".rstrip()
