"""Schema catalog, record storage and the text file format of a database."""

from __future__ import annotations

import copy
import sys
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import TextIO

_SCHEMA_TAG = "[SCHEMA:"
_RELATIONSHIP_TAG = "[RELATIONSHIP:"
_DATA_TAG = "[DATA:"


class CatalogError(Exception):
    """Raised when the catalog and the stored data do not agree."""


class TableNotFoundError(CatalogError):
    """Raised when a table that is asked for does not exist."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Table not found: {table_name}")
        self.table_name = table_name


@dataclass
class ColumnMetadata:
    """A column: its name and a free-form type name such as "int" or "string"."""

    name: str
    type: str


@dataclass
class TableSchema:
    """The logical definition of a table."""

    name: str
    columns: list[ColumnMetadata] = field(default_factory=list)


@dataclass
class RecordReference:
    """A reference to one record by its key value."""

    key_value: str


@dataclass
class RelationshipOwner:
    """The owner side of a relationship and its links to member records."""

    table_name: str = ""
    links: list[tuple[RecordReference, list[RecordReference]]] = field(
        default_factory=list
    )


@dataclass
class RelationshipMember:
    """The member side of a relationship."""

    table_name: str = ""
    record_groups: list[list[RecordReference]] = field(default_factory=list)


@dataclass
class RelationshipMetadata:
    """A named relationship between an owner table and a member table."""

    name: str
    owner: RelationshipOwner = field(default_factory=RelationshipOwner)
    member: RelationshipMember = field(default_factory=RelationshipMember)


@dataclass
class SystemCatalog:
    """All table schemas and relationships of a database."""

    schemas: list[TableSchema] = field(default_factory=list)
    relationships: list[RelationshipMetadata] = field(default_factory=list)

    def add_schema(self, schema: TableSchema) -> None:
        self.schemas.append(schema)

    def add_relationship(self, relationship: RelationshipMetadata) -> None:
        self.relationships.append(relationship)

    def find_schema(self, name: str) -> TableSchema | None:
        """Return the first schema with the given name, or None."""
        return next((s for s in self.schemas if s.name == name), None)


@dataclass
class TableRecord:
    """One row: a mapping of column names to string values."""

    fields: dict[str, str] = field(default_factory=dict)

    def __getitem__(self, name: str) -> str:
        return self.fields[name]

    def __setitem__(self, name: str, value: str) -> None:
        self.fields[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self.fields


@dataclass
class DataTable:
    """The records stored for one table, in insertion order."""

    records: list[TableRecord] = field(default_factory=list)

    def insert_record(self, record: TableRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def __getitem__(self, index: int) -> TableRecord:
        return self.records[index]

    def __iter__(self) -> Iterator[TableRecord]:
        return iter(self.records)


def _split_fields(text: str, sep: str) -> list[str]:
    """Split like reading delimited tokens from a stream: no trailing empty token."""
    parts = text.split(sep)
    if parts and parts[-1] == "":
        parts.pop()
    return parts


def _section_name(line: str, tag: str) -> str:
    return line[len(tag):len(line) - 1]


def _parse_link(line: str) -> tuple[RecordReference, list[RecordReference]]:
    link_data = line[len("Link:"):]
    colon = link_data.find(":")
    if colon == -1:
        # Without a separator the whole text serves as both owner key and member list.
        owner_key, members_text = link_data, link_data
    else:
        owner_key, members_text = link_data[:colon], link_data[colon + 1:]
    members = [RecordReference(ref) for ref in _split_fields(members_text, ",")]
    return RecordReference(owner_key), members


class Database:
    """A catalog together with the data tables it describes."""

    def __init__(self, catalog: SystemCatalog | None = None) -> None:
        self.catalog = copy.deepcopy(catalog) if catalog is not None else SystemCatalog()
        self.tables: dict[str, DataTable] = {}

    def set_table(self, table_name: str, table: DataTable) -> None:
        self.tables[table_name] = copy.deepcopy(table)

    def dumps(self) -> str:
        """Serialise the whole database to its text format."""
        out: list[str] = []
        for schema in self.catalog.schemas:
            out.append(f"{_SCHEMA_TAG}{schema.name}]\n")
            out.extend(f"{col.name}:{col.type}\n" for col in schema.columns)

        for rel in self.catalog.relationships:
            out.append(f"{_RELATIONSHIP_TAG}{rel.name}]\n")
            out.append(f"Owner:{rel.owner.table_name}\n")
            out.append(f"Member:{rel.member.table_name}\n")
            for owner_ref, member_refs in rel.owner.links:
                refs = ",".join(ref.key_value for ref in member_refs)
                out.append(f"Link:{owner_ref.key_value}:{refs}\n")

        for table_name, table in self.tables.items():
            out.append(f"{_DATA_TAG}{table_name}]\n")
            schema = self.catalog.find_schema(table_name)
            if schema is None:
                raise CatalogError("Missing schema for table")
            out.append("".join(f"{col.name}\t" for col in schema.columns) + "\n")
            for record in table:
                out.append("".join(f"{record[col.name]}\t" for col in schema.columns) + "\n")
        return "".join(out)

    @classmethod
    def loads(cls, text: str) -> Database:
        """Build a database from its text format."""
        catalog = SystemCatalog()
        tables: dict[str, DataTable] = {}
        current_schema: TableSchema | None = None
        current_rel: RelationshipMetadata | None = None
        current_data_table = ""
        header_seen = False

        for line in text.split("\n"):
            if not line:
                continue

            if line.startswith("["):
                if current_schema is not None:
                    catalog.add_schema(current_schema)
                    current_schema = None
                if current_rel is not None:
                    catalog.add_relationship(current_rel)
                    current_rel = None
                current_data_table = ""
                header_seen = False

                if line.startswith(_SCHEMA_TAG):
                    current_schema = TableSchema(_section_name(line, _SCHEMA_TAG))
                elif line.startswith(_RELATIONSHIP_TAG):
                    current_rel = RelationshipMetadata(_section_name(line, _RELATIONSHIP_TAG))
                elif line.startswith(_DATA_TAG):
                    current_data_table = _section_name(line, _DATA_TAG)
                    tables.setdefault(current_data_table, DataTable())
                continue

            if current_schema is not None:
                name, colon, col_type = line.partition(":")
                if colon:
                    current_schema.columns.append(ColumnMetadata(name, col_type))
            elif current_rel is not None:
                if line.startswith("Owner:"):
                    current_rel.owner.table_name = line[len("Owner:"):]
                elif line.startswith("Member:"):
                    current_rel.member.table_name = line[len("Member:"):]
                elif line.startswith("Link:"):
                    current_rel.owner.links.append(_parse_link(line))
            elif current_data_table:
                table = tables.setdefault(current_data_table, DataTable())
                if not header_seen:
                    header_seen = True
                    continue
                schema = catalog.find_schema(current_data_table)
                if schema is None:
                    raise CatalogError(f"Missing schema for table: {current_data_table}")
                values = _split_fields(line, "\t")
                if len(values) < len(schema.columns):
                    raise CatalogError(f"Malformed data row in table: {current_data_table}")
                record = TableRecord()
                for col, value in zip(schema.columns, values):
                    record[col.name] = value
                table.insert_record(record)

        if current_schema is not None:
            catalog.add_schema(current_schema)
        if current_rel is not None:
            catalog.add_relationship(current_rel)

        db = cls(catalog)
        for name, table in tables.items():
            db.set_table(name, table)
        return db

    def save_to_file(self, filename: str) -> None:
        text = self.dumps()
        with open(filename, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)

    @classmethod
    def load_from_file(cls, filename: str) -> Database:
        with open(filename, encoding="utf-8", newline="") as fh:
            return cls.loads(fh.read())

    def render(self, err: TextIO | None = None) -> str:
        """Return a readable listing of every table; tables without a schema are reported to err."""
        err = sys.stderr if err is None else err
        out: list[str] = []
        for table_name, table in self.tables.items():
            schema = self.catalog.find_schema(table_name)
            if schema is None:
                err.write(f"Error: Schema not found for table '{table_name}'\n")
                continue

            out.append(f"=== {table_name} ===\n")
            out.append("Columns:\n")
            out.extend(f"  {col.name} ({col.type})\n" for col in schema.columns)
            out.append(f"\nRecords ({len(table)} entries):\n")
            out.append("".join(f"{col.name}\t" for col in schema.columns))
            out.append("\n---------------------------------\n")
            for record in table:
                cells = (
                    f"{record[col.name]}\t" if col.name in record else "<missing>\t"
                    for col in schema.columns
                )
                out.append("".join(cells) + "\n")
            out.append("\n\n")
        return "".join(out)

    def print(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        out = sys.stdout if out is None else out
        out.write(self.render(err))

    def delete_table(self, table_name: str) -> None:
        """Remove a table, its schema and every relationship that involves it."""
        if table_name not in self.tables:
            raise TableNotFoundError(table_name)
        self.catalog.schemas = [s for s in self.catalog.schemas if s.name != table_name]
        self.catalog.relationships = [
            rel
            for rel in self.catalog.relationships
            if table_name not in (rel.owner.table_name, rel.member.table_name)
        ]
        del self.tables[table_name]