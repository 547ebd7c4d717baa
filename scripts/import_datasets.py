#!/usr/bin/env python3
"""
Load CSV exports into the SQLite datasets and object store.

CSV columns:
    audio entries:  expression,reading,source,file,display
    pitch accents:  expression,reading,pitch,count

Audio files are uploaded from a directory laid out as
<audio-dir>/<source>_files/<file>, the same layout as the object keys.

Usage:
    python scripts/import_datasets.py --audio-csv entries.csv --audio-db ./audio_entries.db
    python scripts/import_datasets.py --pitch-csv pitch.csv --pitch-db ./pitch_accents.db
    python scripts/import_datasets.py --audio-dir ./files --objects-db ./audio_objects.db
"""

import argparse
import asyncio
import csv
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from services.datasets import AudioEntry, PitchEntry, SQLiteAudioDataset, SQLitePitchDataset  # noqa: E402
from services.storage import SQLiteObjectStore  # noqa: E402


def import_audio_entries(csv_path: str, db_path: str) -> int:
    with open(csv_path, newline="", encoding="utf-8") as f:
        entries = [
            AudioEntry(
                expression=row["expression"],
                reading=row.get("reading") or "",
                source=row["source"],
                file=row["file"],
                display=row.get("display") or None,
            )
            for row in csv.DictReader(f)
        ]
    return SQLiteAudioDataset(db_path=db_path).add_entries(entries)


def import_pitch_entries(csv_path: str, db_path: str) -> int:
    with open(csv_path, newline="", encoding="utf-8") as f:
        entries = [
            PitchEntry(
                id="",
                expression=row["expression"],
                reading=row.get("reading") or "",
                pitch=row["pitch"],
                count=int(row.get("count") or 0),
            )
            for row in csv.DictReader(f)
        ]
    return SQLitePitchDataset(db_path=db_path).add_entries(entries)


async def upload_audio_files(audio_dir: str, db_path: str) -> int:
    """Upload every file below audio_dir, keyed by its relative path."""
    store = SQLiteObjectStore(db_path=db_path)
    root = Path(audio_dir)
    uploaded = 0
    for path in sorted(root.rglob("*")):
        if path.is_file():
            await store.put(path.relative_to(root).as_posix(), path.read_bytes())
            uploaded += 1
    return uploaded


def main():
    parser = argparse.ArgumentParser(description="Import pronunciation datasets into SQLite")
    parser.add_argument("--audio-csv", help="CSV of audio entries")
    parser.add_argument("--audio-db", default="./audio_entries.db", help="Audio dataset database")
    parser.add_argument("--pitch-csv", help="CSV of pitch accents")
    parser.add_argument("--pitch-db", default="./pitch_accents.db", help="Pitch dataset database")
    parser.add_argument("--audio-dir", help="Directory of <source>_files/ folders to upload")
    parser.add_argument("--objects-db", default="./audio_objects.db", help="Object store database")
    args = parser.parse_args()

    if not (args.audio_csv or args.pitch_csv or args.audio_dir):
        parser.error("nothing to import: pass --audio-csv, --pitch-csv or --audio-dir")

    if args.audio_csv:
        count = import_audio_entries(args.audio_csv, args.audio_db)
        print(f"✓ Imported {count} audio entries into {args.audio_db}")

    if args.pitch_csv:
        count = import_pitch_entries(args.pitch_csv, args.pitch_db)
        print(f"✓ Imported {count} pitch accents into {args.pitch_db}")

    if args.audio_dir:
        count = asyncio.run(upload_audio_files(args.audio_dir, args.objects_db))
        print(f"✓ Uploaded {count} audio files into {args.objects_db}")


if __name__ == "__main__":
    main()
