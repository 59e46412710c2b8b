# tablecatalog

tablecatalog is a small in-memory table store. It holds two things:

- a system catalog of table schemas and owner/member relationships;
- the rows of each table.

A database can be written to a plain-text file and read back from it.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from tablecatalog.catalog import (
    ColumnMetadata, TableSchema, SystemCatalog, TableRecord, DataTable, Database,
)

catalog = SystemCatalog()
catalog.add_schema(TableSchema("City", [ColumnMetadata("CT#", "string"),
                                        ColumnMetadata("Name", "string")]))

db = Database(catalog)
table = DataTable()
row = TableRecord()
row["CT#"] = "CT1"
row["Name"] = "Seattle"
table.insert_record(row)
db.set_table("City", table)

db.print()                      # readable listing of every table
db.save_to_file("city.db")      # plain-text serialization
loaded = Database.load_from_file("city.db")
loaded.delete_table("City")     # drops the schema, its relationships and the data
```

### Building blocks

- `TableRecord` maps column names to string values. It supports `record[name]`, `record[name] = value` and `name in record`.
- `DataTable` keeps records in insertion order. It supports `len()`, indexing and iteration.
- `Database` takes its own copies of the catalog it is given and of every table passed to `set_table`.

### Reading and writing

- `Database.dumps()` and `Database.loads(text)` work on strings. They use the same format as `save_to_file` and `load_from_file`.
- `render(err=None)` returns the listing as a string. A table that has no schema is left out of the listing, and a message about it is written to `err`, which is standard error by default.
- `print(out=None, err=None)` writes the listing to `out`, which is standard output by default.

### Errors

- `delete_table` raises `TableNotFoundError` for a table that does not exist. It is a subclass of `CatalogError`.
- `dumps` raises `CatalogError` when a table has no schema.
- `loads` raises `CatalogError` when a data section comes before the schema of its table.
- `loads` also raises `CatalogError` when a data row has fewer values than the schema has columns.

### File format

The file has three kinds of sections:

- `[SCHEMA:<table>]`, followed by one `column:type` line per column.
- `[RELATIONSHIP:<name>]`, followed by an `Owner:<table>` line, a `Member:<table>` line and
  `Link:<owner key>:<member key>,<member key>,...` lines.
- `[DATA:<table>]`, followed by a tab-separated header line and one
  tab-separated line per record.

Blank lines are ignored.

## Demo

```
tablecatalog-demo [-d DIRECTORY]
```

The demo builds a sample coffee-company database of companies, cafeterias, workers and cities, and prints it. It then:

1. saves it to `coffee.db`;
2. loads it back and prints it again;
3. deletes the `Worker` table;
4. saves the result to `coffee1.db`.

Both files are written to `DIRECTORY`, which defaults to the current directory. The same steps are available from Python as `tablecatalog.demo.main()`. The sample database alone is returned by `tablecatalog.demo.populate_coffee_database()`.

## What it does not do

- There is no query language, no indexing and no server: tables are reached only through the Python objects above.
- Column types are names only. Every value is stored as a string.
- Relationship links are not checked against the rows of the tables they name.
- The member record groups of a relationship are kept in memory, but they are not written to the file format.