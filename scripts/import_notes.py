import json
import sys
import logging
from pathlib import Path

# Ensure 'src' on path
SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from research_notes.ingest import IngestService  # noqa: E402
from research_notes.utils.text_cleaning import clean_text  # noqa: E402
from research_notes.vectorstore.content_store import ContentStore  # noqa: E402

# --- Configuration ---
INPUT_FILE = "notes.jsonl"
# --- End of Configuration ---


def setup_logging():
    # Log to both standard output (console) and a file
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler("import_notes.log"),
        ],
    )


def source_id_for(store: ContentStore, cache: dict, title: str, url) -> int:
    """Return the id of the source with this title and url, creating it once."""
    key = (title, url or None)
    if key not in cache:
        for source in store.list_sources():
            cache.setdefault((source.title, source.url or None), source.id)
    if key not in cache:
        cache[key] = store.add_source(title, url).id
        logging.info(f"   Created source {cache[key]}: {title!r}")
    return cache[key]


def import_lines(lines, store: ContentStore, service: IngestService):
    """Ingest one snippet per JSON line; returns (lines_read, imported, skipped).

    Each line must be an object like
    {"source_title": "...", "source_url": "...", "content_text": "..."}.
    A line that is not such an object, or that fails to ingest, is logged and
    skipped; the rest of the file is still imported.
    """
    sources = {}
    line_count = 0
    imported = 0
    skipped = 0

    for line in lines:
        line_count += 1
        if not line.strip():
            continue

        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            logging.warning(f"   Skipping a bad JSON line at line {line_count}")
            skipped += 1
            continue

        if not isinstance(record, dict):
            logging.warning(f"   Skipping line {line_count} (expected a JSON object)")
            skipped += 1
            continue

        title = clean_text(record.get("source_title"))
        text = str(record.get("content_text") or "").strip()
        if not title or not text:
            logging.warning(f"   Skipping line {line_count} (missing source_title or content_text)")
            skipped += 1
            continue

        try:
            source_id = source_id_for(store, sources, title, record.get("source_url"))
            service.ingest(source_id, text)
            imported += 1
        except Exception as e:
            logging.warning(f"   Skipping line {line_count}: {e}")
            skipped += 1

    return line_count, imported, skipped


def main():
    setup_logging()
    logging.info("Starting import...")
    logging.info(f"Input file: {INPUT_FILE}")

    store = ContentStore()
    service = IngestService(store=store)

    try:
        with open(INPUT_FILE, "r", encoding="utf-8") as infile:
            line_count, imported, skipped = import_lines(infile, store, service)
    except FileNotFoundError:
        logging.error(f"Error: Input file not found: {INPUT_FILE}")
        sys.exit(1)

    logging.info("Import complete!")
    logging.info("---")
    logging.info(f"Total lines read:   {line_count:,}")
    logging.info(f"Snippets imported:  {imported:,}")
    logging.info(f"Lines skipped:      {skipped:,}")
    logging.info("---")


if __name__ == "__main__":
    main()
