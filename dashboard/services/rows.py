#  Agent Dashboard - Row Helpers
#
#  Converts sqlite3.Row results into plain dicts: "<name>_json" TEXT columns
#  are decoded into "<name>", integer flags into bools.
#
#  Depends on: (none)
#  Used by:    services/*

import json
import sqlite3


def row_to_dict(row: sqlite3.Row, *, bool_fields: tuple[str, ...] = ()) -> dict:
    """Convert a DB row to a dict with JSON columns decoded."""
    out: dict = {}
    for key in row.keys():
        value = row[key]
        if key.endswith("_json"):
            out[key[: -len("_json")]] = json.loads(value) if value else None
        elif key in bool_fields:
            out[key] = bool(value) if value is not None else None
        else:
            out[key] = value
    return out


def rows_to_dicts(rows: list[sqlite3.Row], *, bool_fields: tuple[str, ...] = ()) -> list[dict]:
    return [row_to_dict(r, bool_fields=bool_fields) for r in rows]
