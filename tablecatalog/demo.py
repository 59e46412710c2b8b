"""Sample coffee-shop database: build it, print it, save it, reload it and drop a table."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from tablecatalog.catalog import (
    ColumnMetadata,
    DataTable,
    Database,
    RecordReference,
    RelationshipMember,
    RelationshipMetadata,
    RelationshipOwner,
    SystemCatalog,
    TableRecord,
    TableSchema,
)

_SCHEMAS: dict[str, list[tuple[str, str]]] = {
    "Company": [("C#", "string"), ("Name", "string"), ("HQ", "string")],
    "Cafeteria": [("CF#", "string"), ("Location", "string"), ("Seats", "int")],
    "Worker": [("W#", "string"), ("Name", "string"), ("Position", "string")],
    "City": [("CT#", "string"), ("Name", "string"), ("Country", "string")],
}

# name -> (owner table, links, member table, member keys)
_RELATIONSHIPS: dict[str, tuple[str, list[tuple[str, list[str]]], str, list[str]]] = {
    "CompanyCafeterias": (
        "Company",
        [("C1", ["CF1", "CF2"]), ("C2", ["CF3"])],
        "Cafeteria",
        ["CF1", "CF2", "CF3"],
    ),
    "CompanyWorkers": (
        "Company",
        [("C1", ["W1", "W2"]), ("C2", ["W3"])],
        "Worker",
        ["W1", "W2", "W3"],
    ),
    "CompanyHQ": (
        "Company",
        [("C1", ["CT1"]), ("C2", ["CT2"])],
        "City",
        ["CT1", "CT2"],
    ),
}

_ROWS: dict[str, list[tuple[str, ...]]] = {
    "Company": [
        ("SBUX", "Starbucks", "Seattle"),
        ("BLUE", "Blue Bottle", "Oakland"),
    ],
    "Cafeteria": [
        ("CF1", "CT1", "50"),
        ("CF2", "CT2", "40"),
        ("CF3", "CT2", "30"),
    ],
    "Worker": [
        ("W1", "Alice", "Manager"),
        ("W2", "Bob", "Barista"),
        ("W3", "Charlie", "Cashier"),
    ],
    "City": [
        ("CT1", "Seattle", "USA"),
        ("CT2", "Oakland", "USA"),
    ],
}


def _relationship(
    name: str,
    owner_table: str,
    links: list[tuple[str, list[str]]],
    member_table: str,
    member_keys: list[str],
) -> RelationshipMetadata:
    owner = RelationshipOwner(
        owner_table,
        [
            (RecordReference(key), [RecordReference(m) for m in members])
            for key, members in links
        ],
    )
    member = RelationshipMember(
        member_table, [[RecordReference(key)] for key in member_keys]
    )
    return RelationshipMetadata(name, owner, member)


def populate_coffee_database() -> Database:
    """Return the sample database of companies, cafeterias, workers and cities."""
    catalog = SystemCatalog()
    for table_name, columns in _SCHEMAS.items():
        catalog.add_schema(
            TableSchema(table_name, [ColumnMetadata(n, t) for n, t in columns])
        )
    for name, (owner, links, member, keys) in _RELATIONSHIPS.items():
        catalog.add_relationship(_relationship(name, owner, links, member, keys))

    db = Database(catalog)
    for table_name, rows in _ROWS.items():
        column_names = [name for name, _ in _SCHEMAS[table_name]]
        table = DataTable()
        for row in rows:
            table.insert_record(TableRecord(dict(zip(column_names, row))))
        db.set_table(table_name, table)
    return db


def main(argv: list[str] | None = None) -> int:
    """Run the sample: print, save, reload, print again, drop Worker and save."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "-d",
        "--directory",
        default=".",
        help="directory where coffee.db and coffee1.db are written",
    )
    args = parser.parse_args(argv)
    directory = Path(args.directory)

    db = populate_coffee_database()
    db.print()

    first = directory / "coffee.db"
    db.save_to_file(str(first))

    sys.stdout.write("\nTesting serialization!!!\n\n")
    reloaded = Database.load_from_file(str(first))
    reloaded.print()
    reloaded.delete_table("Worker")
    reloaded.save_to_file(str(directory / "coffee1.db"))
    return 0


if __name__ == "__main__":
    sys.exit(main())