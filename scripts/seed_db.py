#!/usr/bin/env python3
import argparse
import json
import logging
import random
import sys

from talentflow.db.record_store import RecordStore
from talentflow.db.seed import DEFAULT_CANDIDATE_COUNT, DEFAULT_JOB_COUNT, seed_database
from talentflow.models.errors import ToolError


def parse_args():
    parser = argparse.ArgumentParser(
        description="Populate an empty TalentFlow record store with sample data."
    )
    parser.add_argument(
        "--db",
        default=None,
        help="Record store path (default: TALENTFLOW_DB or data/talentflow.db).",
    )
    parser.add_argument(
        "--jobs",
        type=int,
        default=DEFAULT_JOB_COUNT,
        help=f"Number of jobs to generate (default: {DEFAULT_JOB_COUNT}).",
    )
    parser.add_argument(
        "--candidates",
        type=int,
        default=DEFAULT_CANDIDATE_COUNT,
        help=f"Number of candidates to generate (default: {DEFAULT_CANDIDATE_COUNT}).",
    )
    parser.add_argument(
        "--random-seed",
        type=int,
        default=None,
        help="Seed for the random generator, for reproducible data.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    rng = random.Random(args.random_seed)
    try:
        with RecordStore(args.db) as store:
            summary = seed_database(
                store, rng=rng, job_count=args.jobs, candidate_count=args.candidates
            )
            summary["db_path"] = str(store.resolved_path or args.db)
    except ToolError as e:
        print(json.dumps(e.to_dict(), indent=2), file=sys.stderr)
        return 1

    print(json.dumps(summary, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
