#!/usr/bin/env python3
"""
run_age_grade.py - Age-Grade Table Runner

Example driver for the age_grade_tables package:
1. Print a built-in table in array or json format
2. Load athlete results (CSV) or generate a synthetic field
3. Attach age-grade factors with a bulk annotator
4. Report timing, match counts and the fastest age-graded results

Usage:
    python run_age_grade.py --show --table 2025_ironman703 --format json

    python run_age_grade.py --synthetic 40000 --table 2025_ironman

    python run_age_grade.py \\
        --input results.csv \\
        --table 2025_ironman \\
        --time-field finish_time \\
        --output graded.csv

Author: Age Grade Tables Project
Version: 1.0.0
"""

import argparse
import json
import sys
import logging
import time
from typing import Optional

import numpy as np
import pandas as pd

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def generate_sample_athletes(count: int, seed: Optional[int] = None) -> pd.DataFrame:
    """Random athletes aged 18-89 with finish times between 8 and 10 hours."""
    rng = np.random.default_rng(seed)
    return pd.DataFrame({
        'id': np.arange(1, count + 1),
        'name': [f"Athlete {i}" for i in range(1, count + 1)],
        'age': rng.integers(18, 90, size=count),
        'gender': rng.choice(['M', 'F'], size=count),
        'finish_time': rng.integers(28800, 36000, size=count),
    })


def show_table(table_name: str, fmt: str) -> None:
    from age_grade_tables import get_table

    table = get_table(table_name, fmt)
    print(f"--- {table_name} ({fmt} format) ---")
    if fmt == 'json':
        print(json.dumps(table, indent=2))
    else:
        for entry in table:
            print(list(entry))


def run_annotation(
    athletes: pd.DataFrame,
    table_name: str,
    time_field: Optional[str] = 'finish_time',
    normalize_gender: bool = False,
    top: int = 5,
) -> pd.DataFrame:
    """
    Annotate a field of athletes and print a summary.

    Returns:
        Annotated DataFrame (factor and, with a time field, age-graded time)
    """
    from age_grade_tables import create_annotator

    print("=" * 70)
    print("AGE-GRADE ANNOTATION")
    print("=" * 70)
    print(f"Table:     {table_name}")
    print(f"Athletes:  {len(athletes):,}")
    print()

    annotator = create_annotator({
        'table': table_name,
        'time_field': time_field,
        'normalize_gender': normalize_gender,
    })

    start = time.time()
    results = annotator.annotate_frame(athletes)
    elapsed = time.time() - start

    matched = results[results['factor'].notna()]
    print(f"Annotated in {elapsed * 1000:.1f} ms")
    print(f"  With factor:    {len(matched):,}")
    print(f"  Without factor: {len(results) - len(matched):,}")

    if time_field is not None and len(matched):
        graded = matched.sort_values('age_graded_time').head(top)
        print()
        print(f"Fastest {len(graded)} age-graded results:")
        for _, row in graded.iterrows():
            print(f"  {str(row.get('name', row.name)):<20} {row['gender']} {int(row['age']):>3}  "
                  f"raw {row[time_field] / 3600:6.2f}h  factor {row['factor']:.3f}  "
                  f"graded {row['age_graded_time'] / 3600:6.2f}h")

    return results


def main():
    parser = argparse.ArgumentParser(
        description='Age-grade factor lookup for triathlon results',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print a table
  python run_age_grade.py --show --table 2025_ironman703 --format json

  # Annotate a synthetic field of 40,000 athletes
  python run_age_grade.py --synthetic 40000

  # Annotate a results file
  python run_age_grade.py --input results.csv --output graded.csv
"""
    )

    parser.add_argument('--table', type=str, default='2025_ironman',
                        help='Table name (2025_ironman, 2025_ironman703)')
    parser.add_argument('--format', type=str, default='array', help='Table format for --show (array, json)')
    parser.add_argument('--show', action='store_true', help='Print the table and exit')
    parser.add_argument('--input', type=str, help='Athlete results CSV (gender, age columns)')
    parser.add_argument('--synthetic', type=int, help='Generate N random athletes instead of --input')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for --synthetic')
    parser.add_argument('--time-field', type=str, default='finish_time',
                        help='Finish time column in seconds (empty string to skip)')
    parser.add_argument('--normalize-gender', action='store_true',
                        help="Accept 'male'/'female'/'m'/'f' gender spellings")
    parser.add_argument('--top', type=int, default=5, help='Age-graded results to print')
    parser.add_argument('--output', type=str, help='Write annotated results to CSV')

    args = parser.parse_args()

    try:
        if args.show:
            show_table(args.table, args.format)
            return

        if args.input:
            athletes = pd.read_csv(args.input)
            # Ages like "N/A" would otherwise make the whole column strings
            if 'age' in athletes.columns:
                athletes['age'] = pd.to_numeric(athletes['age'], errors='coerce')
        elif args.synthetic:
            athletes = generate_sample_athletes(args.synthetic, seed=args.seed)
        else:
            print("ERROR: Provide --input, --synthetic or --show.")
            print("Use --help for usage.")
            sys.exit(1)

        results = run_annotation(
            athletes,
            table_name=args.table,
            time_field=args.time_field or None,
            normalize_gender=args.normalize_gender,
            top=args.top,
        )
    except ValueError as e:
        # Unknown table/format, bad config or missing columns
        logger.error(str(e))
        sys.exit(2)

    if args.output:
        results.to_csv(args.output, index=False)
        logger.info(f"Annotated results written to {args.output}")


if __name__ == '__main__':
    main()
