#!/usr/bin/env python
"""Generate and cache the benchmark point sets with exact ground truth."""

import sys
from pathlib import Path

# Add package source to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from rtree_knn.datasets.loader import list_datasets, load_dataset
from rtree_knn.datasets.utils import dataset_stats


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Generate benchmark point sets")
    parser.add_argument(
        "--datasets",
        nargs="+",
        default=list_datasets(),
        choices=list_datasets(),
        help="Datasets to generate",
    )
    parser.add_argument("--data-dir", type=Path, default=None, help="Cache directory")
    args = parser.parse_args()

    for name in args.datasets:
        print(f"\n{'='*60}")
        print(f"Dataset: {name}")
        print(f"{'='*60}")
        try:
            data = load_dataset(name, args.data_dir)
            stats = dataset_stats(data["points"], metric=data["metric"])
            print(f"  Points:  {data['points'].shape}")
            print(f"  Queries: {data['queries'].shape}")
            print(f"  Ground truth neighbors: {data['neighbors'].shape}")
            print(f"  Metric: {data['metric']}")
            print(f"  Extent: ({stats['min_x']:.2f}, {stats['min_y']:.2f}) - "
                  f"({stats['max_x']:.2f}, {stats['max_y']:.2f})")
            print(f"  Mean NN spacing: {stats['mean_spacing']:.4f} ({stats['spacing_units']})")
        except Exception as e:
            print(f"  Error: {e}")


if __name__ == "__main__":
    main()
