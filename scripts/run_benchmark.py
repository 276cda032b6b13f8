#!/usr/bin/env python
"""Run benchmark comparisons between best-first k-NN and baselines."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

import argparse
import json

from rtree_knn.datasets.loader import list_datasets, load_dataset
from rtree_knn.evaluation.benchmark import run_benchmark_sweep
from rtree_knn.evaluation.plotting import plot_nodes_vs_node_size, plot_qps_comparison, plot_qps_vs_k
from rtree_knn.geometry.distance import list_metrics


def main():
    parser = argparse.ArgumentParser(description="Run best-first k-NN benchmark")
    parser.add_argument(
        "--dataset", default="uniform-10k",
        choices=list_datasets(),
        help="Dataset to benchmark on",
    )
    parser.add_argument(
        "--metric", default=None,
        choices=list_metrics(),
        help="Metric to search with (defaults to the dataset's ground-truth metric)",
    )
    parser.add_argument("--n-queries", type=int, default=100, help="Number of queries")
    parser.add_argument("--k", type=int, default=10, help="Number of neighbors")
    parser.add_argument("--ks", type=int, nargs="+", default=None, help="Sweep several k (overrides --k)")
    parser.add_argument("--node-sizes", type=int, nargs="+", default=None, help="Node capacities")
    parser.add_argument("--output-dir", type=str, default="results", help="Output directory")
    args = parser.parse_args()

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    print(f"\nLoading {args.dataset}...")
    data = load_dataset(args.dataset)
    points = data["points"]
    queries = data["queries"][:args.n_queries]
    ground_truth = data["neighbors"][:args.n_queries]
    metric = args.metric or data["metric"]
    if metric != data["metric"]:
        print(f"Note: ground truth uses {data['metric']}, searching with {metric}")
    print(f"Points: {points.shape}, Queries: {queries.shape}, metric={metric}")

    ks = args.ks or [args.k]

    print("\nRunning benchmarks...")
    results = run_benchmark_sweep(
        points=points,
        queries=queries,
        ground_truth=ground_truth,
        metric=metric,
        node_sizes=args.node_sizes,
        ks=ks,
    )

    results_data = []
    for r in results:
        results_data.append({
            "method": r.method,
            "params": r.params,
            "metric": r.metric,
            "k": r.k,
            "recall@1": r.recall_at_1,
            "recall@k": r.recall_at_k,
            "qps": r.qps,
            "build_time": r.build_time,
            "memory_bytes": r.memory_bytes,
            "mean_nodes_expanded": r.mean_nodes_expanded,
            "ordering_violations": r.ordering_violations,
        })

    json_path = output_dir / f"{args.dataset}_{metric}_results.json"
    with open(json_path, "w") as f:
        json.dump(results_data, f, indent=2)
    print(f"\nResults saved to {json_path}")

    print("\nGenerating plots...")
    # Per-configuration plots use the first k of the sweep
    first_k = [r for r in results if r.k == ks[0]]
    plot_qps_comparison(
        first_k,
        save_path=output_dir / f"{args.dataset}_{metric}_qps.png",
        title=f"{args.dataset}: QPS at k={ks[0]} ({metric})",
    )
    plot_nodes_vs_node_size(
        first_k,
        save_path=output_dir / f"{args.dataset}_{metric}_nodes.png",
        title=f"{args.dataset}: Nodes Expanded per Query",
    )
    if len(ks) > 1:
        plot_qps_vs_k(
            results,
            save_path=output_dir / f"{args.dataset}_{metric}_qps_vs_k.png",
            title=f"{args.dataset}: QPS vs k ({metric})",
        )

    print(f"\n{'='*72}")
    print(f"Summary for {args.dataset} (n={points.shape[0]}, n_q={queries.shape[0]}, k={ks})")
    print(f"{'='*72}")
    print(f"{'Method':<26} {'k':>5} {'Recall':>8} {'QPS':>10} {'Build(s)':>9} {'Nodes/q':>9} {'Misorder':>9}")
    print(f"{'-'*26} {'-'*5} {'-'*8} {'-'*10} {'-'*9} {'-'*9} {'-'*9}")
    for r in results:
        if r.method == "best_first":
            name = f"best_first(node={r.params.get('node_size', '')})"
        elif r.method == "ckdtree":
            name = f"ckdtree(leaf={r.params.get('leafsize', '')})"
        else:
            name = r.method
        print(f"{name:<26} {r.k:>5d} {r.recall_at_k:>8.3f} {r.qps:>10.0f} {r.build_time:>9.3f} "
              f"{r.mean_nodes_expanded:>9.1f} {r.ordering_violations:>9d}")


if __name__ == "__main__":
    main()
