#!/usr/bin/env python3
"""Utility script to test ExtractionService with a local transcript file.

This script:
1. Reads a transcript file (default: transcript.txt in the project root)
2. Extracts tasks using ExtractionService with the real OpenAI API
3. Prints the candidates with their parsed due dates
"""
import argparse
import asyncio
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add parent directory to path to import services
sys.path.insert(0, str(Path(__file__).parent.parent))

from models.extraction_models import PRIORITY_LABELS
from services.extraction_service import ExtractionError, ExtractionService
from utils.date_utils import to_datetime_input


async def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Extract tasks from a transcript file")
    parser.add_argument(
        "input_file",
        nargs="?",
        default=str(Path(__file__).parent.parent / "transcript.txt"),
    )
    parser.add_argument("--timezone", default="UTC", help="IANA timezone for due dates")
    args = parser.parse_args()

    input_file = Path(args.input_file)
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}")
        sys.exit(1)

    print(f"Reading transcript from: {input_file}")
    transcript = input_file.read_text(encoding="utf-8")
    print(f"Transcript length: {len(transcript)} characters")

    try:
        service = ExtractionService()
        result = await service.extract(transcript, trace_id="local-test")
    except (ValueError, ExtractionError) as e:
        print(f"Error extracting tasks: {e}")
        sys.exit(1)

    if result.is_empty:
        print("No tasks found")
    for i, task in enumerate(result.candidates, 1):
        parsed = to_datetime_input(task.due_date_text, args.timezone) or "unparsed"
        print(
            f"{i}. [{task.priority.value} {PRIORITY_LABELS[task.priority]}] {task.description}\n"
            f"   assignee: {task.assignee}\n"
            f"   due: {task.due_date_text} ({parsed})"
        )

    print(f"\nTasks found: {len(result.candidates)}, invalid records dropped: {result.dropped_count}")


if __name__ == "__main__":
    asyncio.run(main())
