import io

import pytest

from tablecatalog.catalog import (
    CatalogError,
    ColumnMetadata,
    Database,
    DataTable,
    RecordReference,
    RelationshipMember,
    RelationshipMetadata,
    RelationshipOwner,
    SystemCatalog,
    TableNotFoundError,
    TableRecord,
    TableSchema,
)


def _record(**values):
    rec = TableRecord()
    for key, value in values.items():
        rec[key] = value
    return rec


def _table(*records):
    table = DataTable()
    for rec in records:
        table.insert_record(rec)
    return table


def make_catalog():
    catalog = SystemCatalog()
    catalog.add_schema(
        TableSchema("Company", [ColumnMetadata("C", "string"), ColumnMetadata("Name", "string")])
    )
    catalog.add_schema(
        TableSchema("Worker", [ColumnMetadata("W", "string"), ColumnMetadata("Name", "string")])
    )
    catalog.add_relationship(
        RelationshipMetadata(
            "CompanyWorkers",
            RelationshipOwner(
                "Company",
                [(RecordReference("C1"), [RecordReference("W1"), RecordReference("W2")])],
            ),
            RelationshipMember("Worker", [[RecordReference("W1")], [RecordReference("W2")]]),
        )
    )
    return catalog


def make_db():
    db = Database(make_catalog())
    db.set_table("Company", _table(_record(C="SBUX", Name="Starbucks")))
    db.set_table("Worker", _table(_record(W="W1", Name="Alice"), _record(W="W2", Name="Bob")))
    return db


EXPECTED_DUMP = (
    "[SCHEMA:Company]\nC:string\nName:string\n"
    "[SCHEMA:Worker]\nW:string\nName:string\n"
    "[RELATIONSHIP:CompanyWorkers]\nOwner:Company\nMember:Worker\nLink:C1:W1,W2\n"
    "[DATA:Company]\nC\tName\t\nSBUX\tStarbucks\t\n"
    "[DATA:Worker]\nW\tName\t\nW1\tAlice\t\nW2\tBob\t\n"
)


def test_dumps_exact_format():
    assert make_db().dumps() == EXPECTED_DUMP


def test_round_trip_preserves_text():
    loaded = Database.loads(EXPECTED_DUMP)
    assert loaded.dumps() == EXPECTED_DUMP


def test_round_trip_preserves_catalog_and_records():
    db = make_db()
    loaded = Database.loads(db.dumps())
    assert loaded.catalog.schemas == db.catalog.schemas
    assert loaded.tables == db.tables
    rel = loaded.catalog.relationships[0]
    assert rel.owner == db.catalog.relationships[0].owner
    assert rel.member.table_name == "Worker"
    assert rel.member.record_groups == []


def test_file_round_trip(tmp_path):
    path = tmp_path / "coffee.db"
    db = make_db()
    db.save_to_file(str(path))
    assert path.read_text(encoding="utf-8") == EXPECTED_DUMP
    loaded = Database.load_from_file(str(path))
    assert loaded.tables["Worker"][1]["Name"] == "Bob"


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        Database.load_from_file(str(tmp_path / "absent.db"))


def test_loads_skips_empty_lines():
    text = "\n[SCHEMA:T]\n\na:int\n\n[DATA:T]\na\t\n\n1\t\n"
    db = Database.loads(text)
    assert [rec["a"] for rec in db.tables["T"]] == ["1"]


def test_loads_data_without_schema_raises():
    text = "[DATA:Ghost]\nx\t\n1\t\n"
    with pytest.raises(CatalogError, match="Missing schema for table: Ghost"):
        Database.loads(text)


def test_loads_short_row_raises():
    text = "[SCHEMA:T]\na:int\nb:int\n[DATA:T]\na\tb\t\n1\t\n"
    with pytest.raises(CatalogError, match="Malformed data row in table: T"):
        Database.loads(text)


def test_loads_extra_values_are_ignored():
    text = "[SCHEMA:T]\na:int\n[DATA:T]\na\t\n1\t2\t3\n"
    db = Database.loads(text)
    assert db.tables["T"][0].fields == {"a": "1"}


def test_loads_keeps_empty_inner_values():
    text = "[SCHEMA:T]\na:s\nb:s\nc:s\n[DATA:T]\na\tb\tc\t\nx\t\tz\t\n"
    rec = Database.loads(text).tables["T"][0]
    assert (rec["a"], rec["b"], rec["c"]) == ("x", "", "z")


def test_loads_schema_lines_without_colon_ignored():
    db = Database.loads("[SCHEMA:T]\nnocolon\nk:v:w\n")
    assert db.catalog.schemas == [TableSchema("T", [ColumnMetadata("k", "v:w")])]


def test_loads_link_parsing():
    text = "[RELATIONSHIP:R]\nOwner:A\nMember:B\nLink:o1:m1,m2,\nLink:o2:\nLink:solo\n"
    rel = Database.loads(text).catalog.relationships[0]
    assert rel.owner.table_name == "A"
    assert rel.member.table_name == "B"
    assert rel.owner.links == [
        (RecordReference("o1"), [RecordReference("m1"), RecordReference("m2")]),
        (RecordReference("o2"), []),
        (RecordReference("solo"), [RecordReference("solo")]),
    ]


def test_dumps_missing_schema_raises():
    db = Database()
    db.set_table("Orphan", DataTable())
    with pytest.raises(CatalogError):
        db.dumps()


def test_dumps_missing_field_raises_key_error():
    db = Database(make_catalog())
    db.set_table("Company", _table(_record(C="X")))
    with pytest.raises(KeyError):
        db.dumps()


def test_render_worked_example():
    catalog = SystemCatalog()
    catalog.add_schema(TableSchema("City", [ColumnMetadata("CT", "string")]))
    db = Database(catalog)
    db.set_table("City", _table(_record(CT="CT1")))
    expected = (
        "=== City ===\n"
        "Columns:\n"
        "  CT (string)\n"
        "\nRecords (1 entries):\n"
        "CT\t"
        "\n---------------------------------\n"
        "CT1\t\n"
        "\n\n"
    )
    assert db.render(io.StringIO()) == expected


def test_render_marks_missing_fields():
    db = Database(make_catalog())
    db.set_table("Company", _table(_record(C="X")))
    assert "X\t<missing>\t\n" in db.render(io.StringIO())


def test_render_reports_table_without_schema():
    db = Database()
    db.set_table("Orphan", DataTable())
    err = io.StringIO()
    assert db.render(err) == ""
    assert err.getvalue() == "Error: Schema not found for table 'Orphan'\n"


def test_print_writes_render_output():
    db = make_db()
    out = io.StringIO()
    db.print(out, io.StringIO())
    assert out.getvalue() == db.render(io.StringIO())


def test_delete_table_removes_schema_relationships_and_data():
    db = make_db()
    db.delete_table("Worker")
    assert [s.name for s in db.catalog.schemas] == ["Company"]
    assert db.catalog.relationships == []
    assert list(db.tables) == ["Company"]


def test_delete_table_keeps_unrelated_relationships():
    db = make_db()
    db.catalog.add_schema(TableSchema("City", [ColumnMetadata("CT", "string")]))
    db.catalog.add_relationship(
        RelationshipMetadata("Other", RelationshipOwner("City"), RelationshipMember("City"))
    )
    db.set_table("City", DataTable())
    db.delete_table("Worker")
    assert [r.name for r in db.catalog.relationships] == ["Other"]


def test_delete_unknown_table_raises():
    db = make_db()
    with pytest.raises(TableNotFoundError) as info:
        db.delete_table("Nowhere")
    assert info.value.table_name == "Nowhere"
    assert len(db.tables) == 2


def test_database_copies_catalog_and_tables():
    catalog = make_catalog()
    table = _table(_record(C="A", Name="B"))
    db = Database(catalog)
    db.set_table("Company", table)
    table.insert_record(_record(C="Z", Name="Y"))
    db.delete_table("Company")
    assert len(catalog.schemas) == 2
    assert len(table) == 2


def test_find_schema():
    catalog = make_catalog()
    assert catalog.find_schema("Worker").columns[0].name == "W"
    assert catalog.find_schema("Missing") is None


def test_table_record_access():
    rec = TableRecord()
    rec["a"] = "1"
    assert rec["a"] == "1"
    assert "a" in rec
    assert "b" not in rec
    with pytest.raises(KeyError):
        rec["b"]


def test_data_table_sequence_behaviour():
    first, second = _record(k="1"), _record(k="2")
    table = _table(first, second)
    assert len(table) == 2
    assert table[1] is second
    assert list(table) == [first, second]