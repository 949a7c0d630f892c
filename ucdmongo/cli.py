"""Command that downloads the flat UCD XML and loads it into MongoDB."""

from __future__ import annotations

import argparse
import io
import logging
import os
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Optional, Sequence, Union
from urllib.error import HTTPError, URLError
from urllib.request import urlopen

import pymongo
from dotenv import load_dotenv
from pymongo.errors import PyMongoError

from .database import DatabaseError, MongoStore
from .parser import UCDParseError, parse_ucd_xml, process_ucd_for_mongodb

DEFAULT_BASE_URL = "https://www.unicode.org/Public/16.0.0/ucdxml/"
UCD_VERSION = "16.0.0"
XML_NAME = "ucd.all.flat.xml"
ZIP_NAME = "ucd.all.flat.zip"
DEFAULT_MONGODB_URI = "mongodb://localhost:27017"
DEFAULT_DB_NAME = "unicode_db"

_ANALYSIS_TIMEOUT = 30
_TOP_SCRIPTS_SHOWN = 5


class FetchError(Exception):
    """The UCD XML data could not be obtained."""


def _xml_from_zip(archive: zipfile.ZipFile) -> bytes:
    content = b""
    for info in archive.infolist():
        if info.filename != XML_NAME:
            continue
        try:
            with archive.open(info) as member:
                content = member.read()
        except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
            raise FetchError(f"failed to read XML content: {exc}") from exc
    if not content:
        raise FetchError(f"{XML_NAME} not found in zip file")
    return content


def extract_xml_from_zip_file(zip_path: Union[str, os.PathLike]) -> bytes:
    """Return the UCD XML stored in a ZIP archive on disk."""
    try:
        archive = zipfile.ZipFile(zip_path)
    except (zipfile.BadZipFile, OSError) as exc:
        raise FetchError(f"failed to open zip file: {exc}") from exc
    with archive:
        return _xml_from_zip(archive)


def extract_xml_from_zip_bytes(data: bytes) -> bytes:
    """Return the UCD XML stored in an in-memory ZIP archive."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise FetchError(f"failed to create zip reader: {exc}") from exc
    with archive:
        return _xml_from_zip(archive)


def _join_url(base_url: str, name: str) -> str:
    return base_url.rstrip("/") + "/" + name


def fetch_ucd_xml(base_url: str) -> bytes:
    """Download the UCD ZIP archive below ``base_url`` and return its XML."""
    url = _join_url(base_url, ZIP_NAME)
    try:
        with urlopen(url) as response:
            status = response.status
            if status != 200:
                raise FetchError(f"failed to fetch file: status code {status}")
            try:
                data = response.read()
            except OSError as exc:
                raise FetchError(f"failed to read response body: {exc}") from exc
    except HTTPError as exc:
        raise FetchError(f"failed to fetch file: status code {exc.code}") from exc
    except (URLError, OSError, ValueError) as exc:
        raise FetchError(f"failed to fetch file: {exc}") from exc
    return extract_xml_from_zip_bytes(data)


def _write_cache(path: Path, content: bytes, success: str) -> None:
    try:
        path.write_bytes(content)
    except OSError as exc:
        print(f"Warning: failed to save XML cache: {exc}")
    else:
        print(success)


def fetch_ucd_xml_with_cache(
    base_url: str, cache_dir: Optional[Union[str, os.PathLike]] = None
) -> bytes:
    """Return the UCD XML, preferring a cached XML file, then a cached ZIP,
    then the network; what is extracted or downloaded is cached as XML."""
    directory = Path(cache_dir) if cache_dir is not None else Path(tempfile.gettempdir())
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FetchError(f"failed to create cache directory: {exc}") from exc

    xml_path = directory / XML_NAME
    zip_path = directory / ZIP_NAME

    if xml_path.exists():
        print("Using cached XML data...")
        try:
            return xml_path.read_bytes()
        except OSError as exc:
            raise FetchError(f"failed to read cached XML: {exc}") from exc

    if zip_path.exists():
        print("Found cached ZIP file, extracting XML...")
        try:
            content = extract_xml_from_zip_file(zip_path)
        except FetchError as exc:
            print(f"Failed to extract from cached ZIP: {exc}, downloading fresh copy...")
        else:
            _write_cache(xml_path, content, "XML cached successfully.")
            return content

    print("No cache found, downloading from network...")
    content = fetch_ucd_xml(base_url)
    _write_cache(xml_path, content, "XML data cached successfully.")
    return content


def analyze_character_types(store: Any) -> dict[str, int]:
    """Count code points by kind, print the counts and return them."""
    queries = (
        ("total", "Total characters", {}, "error counting total"),
        (
            "with_names",
            "Characters with names",
            {"name": {"$exists": True, "$ne": ""}},
            "error counting with names",
        ),
        ("deprecated", "Reserved characters", {"deprecated": True}, "error counting deprecated"),
        (
            "noncharacter",
            "Noncharacters",
            {"noncharacter": True},
            "error counting noncharacter",
        ),
        (
            "with_cp",
            "Characters with a cp field",
            {"cp": {"$exists": True, "$ne": ""}},
            "error counting with CP",
        ),
    )
    counts: dict[str, int] = {}
    with pymongo.timeout(_ANALYSIS_TIMEOUT):
        for key, label, query, failure in queries:
            try:
                counts[key] = store.code_points.count_documents(query)
            except PyMongoError as exc:
                raise DatabaseError(f"{failure}: {exc}") from exc
            print(f"{label}: {counts[key]}")
    return counts


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ucdmongo",
        description="Load the Unicode Character Database into MongoDB.",
    )
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="where the UCD XML ZIP lives")
    parser.add_argument("--cache-dir", default=None, help="directory for cached downloads")
    return parser


def _load_environment() -> None:
    if load_dotenv():
        print("✓ .env file loaded successfully")
    else:
        logging.getLogger(__name__).warning("Warning: no .env file loaded")
        logging.getLogger(__name__).warning("Continuing with system environment variables...")


def _store_and_report(store: MongoStore, ucd: Any, code_points: list, blocks: list) -> int:
    print("\n5. Creating database indexes...")
    try:
        store.create_indexes()
    except DatabaseError as exc:
        print(f"Error creating indexes: {exc}")
        return 1

    print("\n6. Saving data to MongoDB...")
    ucd.version = UCD_VERSION
    for action, what in (
        (lambda: store.save_ucd(ucd), "UCD"),
        (lambda: store.save_code_points(code_points), "code points"),
        (lambda: store.save_blocks(blocks), "blocks"),
    ):
        try:
            action()
        except DatabaseError as exc:
            print(f"Error saving {what}: {exc}")
            return 1

    print("\n7. Database Statistics:")
    try:
        stats = store.get_stats()
    except DatabaseError as exc:
        print(f"Error getting stats: {exc}")
        return 1
    print(f"✓ Total Code Points: {stats.code_point_count}")
    print(f"✓ Total Blocks: {stats.block_count}")
    print(f"✓ UCD Documents: {stats.ucd_count}")

    print("\n8. Detailed Character Type Analysis:")
    try:
        analyze_character_types(store)
    except DatabaseError as exc:
        print(f"Error analyzing character types: {exc}")
        return 1

    if stats.top_scripts:
        print("\nTop Scripts by Character Count:")
        for script in stats.top_scripts[:_TOP_SCRIPTS_SHOWN]:
            print(f"  {script.script or '(No Script)'}: {script.count} characters")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Fetch, parse and store the UCD; return the process exit status."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    _load_environment()

    print("Unicode Data to MongoDB Processor")
    print("==================================")

    print("1. Fetching Unicode data...")
    try:
        content = fetch_ucd_xml_with_cache(args.base_url, args.cache_dir)
    except FetchError as exc:
        print(f"Error fetching UCD XML content: {exc}")
        return 1
    print(f"Successfully fetched {len(content)} bytes of XML data")

    print("\n2. Parsing XML data...")
    try:
        ucd = parse_ucd_xml(content)
    except UCDParseError as exc:
        print(f"Error parsing XML: {exc}")
        return 1

    print("\n3. Processing data for MongoDB...")
    code_points, blocks = process_ucd_for_mongodb(ucd)

    print("\n4. Connecting to MongoDB...")
    mongo_uri = os.environ.get("MONGODB_URI") or DEFAULT_MONGODB_URI
    db_name = os.environ.get("MONGODB_DB") or DEFAULT_DB_NAME
    try:
        store = MongoStore(mongo_uri, db_name)
    except DatabaseError as exc:
        print(f"Error connecting to MongoDB: {exc}")
        return 1

    with store:
        print(f"Connected to MongoDB at {mongo_uri}, database: {db_name}")
        status = _store_and_report(store, ucd, code_points, blocks)
    if status:
        return status

    print("\n✅ Data successfully imported to MongoDB!")
    print("\nExample queries you can run:")
    print('  - Find character by code point: db.code_points.findOne({"cp": "0041"})')
    print('  - Find characters in Latin block: db.code_points.find({"block": "ASCII"})')
    print('  - Find Chinese characters: db.code_points.find({"script": "Hani"})')
    return 0


if __name__ == "__main__":
    raise SystemExit(main())