#!/usr/bin/env python3
"""Extract, review and save tasks from a transcript through a running API.

This script:
1. Sends a transcript file to POST /api/extract-tasks
2. Opens a ReviewSession on the returned candidates and lets you drop some
3. Approves the rest with one POST /api/tasks call
4. Prints your saved task list

The session token is read from --token or TASK_API_TOKEN.
"""
import argparse
import asyncio
import os
import sys
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Add parent directory to path to import services
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.review_session import EmptyReviewError, ReviewSession
from services.task_api_client import TaskApiClient, TaskApiError


def print_session(session: ReviewSession) -> None:
    for i, task in enumerate(session.candidates, 1):
        print(f"{i}. [{task.priority.value}] {task.description} ({task.assignee}, {task.due_date_text})")


async def main():
    """Main execution function."""
    parser = argparse.ArgumentParser(description="Review extracted tasks and save them")
    parser.add_argument("input_file")
    parser.add_argument("--base-url", default=os.getenv("TASK_API_URL", "http://localhost:8000"))
    parser.add_argument("--token", default=os.getenv("TASK_API_TOKEN"))
    parser.add_argument("--yes", action="store_true", help="Approve every candidate without prompting")
    args = parser.parse_args()

    if not args.token:
        print("Error: a session token is required (--token or TASK_API_TOKEN)")
        sys.exit(1)

    input_file = Path(args.input_file)
    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}")
        sys.exit(1)

    transcript = input_file.read_text(encoding="utf-8")

    async with TaskApiClient(args.base_url, args.token) as client:
        try:
            candidates = await client.extract_tasks(transcript)
        except TaskApiError as e:
            print(f"Error extracting tasks: {e.detail}")
            sys.exit(1)

        if not candidates:
            print("No tasks found")
            return

        session = ReviewSession(candidates)
        print_session(session)

        if not args.yes:
            answer = input("Numbers to remove (comma separated, empty to keep all): ").strip()
            indexes = sorted({int(n) - 1 for n in answer.split(",") if n.strip()}, reverse=True)
            for index in indexes:
                session.remove(index)

        try:
            created = await session.approve_all(client.create_tasks)
        except EmptyReviewError as e:
            print(e)
            return
        except TaskApiError as e:
            print(f"Error saving tasks: {e.detail}")
            sys.exit(1)

        print(f"\nSaved {len(created)} task(s)")
        for task in await client.list_tasks():
            status = "x" if task["completed"] else " "
            print(f"[{status}] {task['description']} ({task['assignee']}, due {task['due_date_local']})")


if __name__ == "__main__":
    asyncio.run(main())
