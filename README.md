# ucdmongo

Imports the Unicode Character Database into MongoDB. It reads the database in
its flat XML form (`ucd.all.flat.xml`). By default it downloads the
Unicode 16.0.0 release.

The `ucdmongo` command works in these steps:

1. It fetches the UCD XML. A cached `ucd.all.flat.xml` in the cache directory
   is used if one is there. If not, a cached `ucd.all.flat.zip` there is
   unpacked. If neither works, `ucd.all.flat.zip` is downloaded from the base
   URL. The XML that was extracted or downloaded is then written to the cache
   as `ucd.all.flat.xml`.
2. It parses the repertoire and the block list. The repertoire holds
   `char`, `reserved`, `noncharacter` and `surrogate` elements.
3. It collects every code point. Reserved code points are marked
   `deprecated` and noncharacters are marked `noncharacter`. Code points that
   have neither `cp` nor `first-cp` are skipped with a warning, and so are
   those that have `first-cp` but no `last-cp`. For the rest, surrounding
   whitespace is trimmed from `name`, `name1`, `block` and `script`. The `#`
   placeholder in mapping properties becomes an empty string.
4. It drops and recreates the indexes. It then replaces the contents of the
   `ucd`, `code_points` and `blocks` collections. Code points are inserted in
   batches of 1000.
5. It prints document counts, a character type summary and up to five of
   the most common scripts.

## Installation

```
pip install .
```

## Usage

```
ucdmongo [--base-url URL] [--cache-dir DIR]
```

- `--base-url`: the directory URL that holds `ucd.all.flat.zip`. The default is
  `https://www.unicode.org/Public/16.0.0/ucdxml/`.
- `--cache-dir`: the directory for cached files. The default is the system
  temporary directory.

The command exits with status 0 on success and 1 after any failure. It prints
the error first.

The connection is set through environment variables. Before they are read,
`python-dotenv` is asked to load a `.env` file. If it finds none, the command
logs a warning and goes on with the system environment.

| Variable      | Default                     |
|---------------|-----------------------------|
| `MONGODB_URI` | `mongodb://localhost:27017` |
| `MONGODB_DB`  | `unicode_db`                |

Example queries once the import has finished:

```
db.code_points.findOne({"cp": "0041"})
db.code_points.find({"block": "ASCII"})
db.code_points.find({"script": "Hani"})
```

## Stored documents

- `ucd` holds one metadata document. It has `description`, `version`,
  `created_at` and `updated_at`.
- `blocks` holds one document per block. Each has `first_cp`, `last_cp`,
  `name` and timestamps.
- `code_points` holds one document per code point or range. Each has `cp`,
  `first_cp` and `last_cp`, the list `name_aliases`, and every tracked
  property under a snake_case key, such as `name`, `block`,
  `general_category`, `script` and `age`. Properties that are missing from the
  XML are stored with their defaults: an empty string, `false` or `0`. The full
  table of tracked attributes is `ucdmongo.properties.ATTRIBUTES`.

## Library use

```python
from ucdmongo.parser import parse_ucd_xml, process_ucd_for_mongodb
from ucdmongo.database import MongoStore

with open("ucd.all.flat.xml", "rb") as fh:
    ucd = parse_ucd_xml(fh.read())

code_points, blocks = process_ucd_for_mongodb(ucd)
ucd.version = "16.0.0"

with MongoStore("mongodb://localhost:27017", "unicode_db") as store:
    store.create_indexes()
    store.save_ucd(ucd)
    store.save_code_points(code_points)
    store.save_blocks(blocks)
    print(store.get_code_point_by_cp("0041"))
    print(store.get_code_points_by_block("ASCII"))
    print(store.get_stats())
```

`MongoStore` pings the server when it is created. You can pass your own
`pymongo.MongoClient` as its `client` argument. `ucdmongo.cli` adds
`fetch_ucd_xml`, `fetch_ucd_xml_with_cache`, `extract_xml_from_zip_file`,
`extract_xml_from_zip_bytes` and `analyze_character_types`.

Property values in the XML are checked as they are read. Each of these raises
`UCDParseError`:

- malformed XML;
- a boolean attribute that is neither `Y` nor `N`;
- a non-integer `ccc` value.

Download and archive failures raise `FetchError`. Database failures raise
`DatabaseError`.

## What it does not do

- It only imports. There is no command for searching or querying the stored
  data. Use the MongoDB shell, or the `MongoStore` lookup methods shown above.
- Only the attributes in the property table are stored. Any other attribute
  in the XML is ignored.
- `group` elements in the repertoire are not read.
- Every run replaces the stored data completely. There is no incremental
  update.

## Development

```
pip install -e ".[test]"
pytest
```