"""Plotting utilities for benchmark visualization."""

from pathlib import Path

import matplotlib.pyplot as plt
import seaborn as sns

from .benchmark import BenchmarkResult


def _display_name(r: BenchmarkResult) -> str:
    """Generate a human-readable label for a benchmark result."""
    if r.method == "best_first":
        return f"best-first(node={r.params.get('node_size', '?')})"
    if r.method == "ckdtree":
        return f"cKDTree(leaf={r.params.get('leafsize', '?')})"
    return r.method


def setup_style():
    """Set up consistent plot style."""
    sns.set_theme(style="whitegrid", font_scale=1.1)
    plt.rcParams["figure.figsize"] = (10, 6)
    plt.rcParams["figure.dpi"] = 100


def _finish(fig, save_path: Path | str | None):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, bbox_inches="tight")
        print(f"Saved: {save_path}")
    else:
        plt.show()
    plt.close(fig)


def plot_qps_comparison(
    results: list[BenchmarkResult],
    save_path: Path | str | None = None,
    title: str | None = None,
):
    """Bar chart of queries per second for each configuration.

    Args:
        results: List of benchmark results.
        save_path: Path to save figure. If None, shows interactively.
        title: Plot title.
    """
    setup_style()
    fig, ax = plt.subplots()

    color_map = {
        "best_first": "steelblue",
        "exhaustive": "indianred",
        "ckdtree": "darkorange",
    }
    names = [_display_name(r) for r in results]
    qps = [r.qps for r in results]
    bars = ax.bar(names, qps, color=[color_map.get(r.method, "gray") for r in results])
    ax.set_ylabel("Queries per Second (QPS)")
    ax.set_yscale("log")
    ax.set_title(title or "Query Throughput")

    for bar, r in zip(bars, results):
        ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height(),
                f"R@{r.k}={r.recall_at_k:.2f}", ha="center", va="bottom", fontsize=9)

    plt.xticks(rotation=30, ha="right")
    _finish(fig, save_path)


def plot_nodes_vs_node_size(
    results: list[BenchmarkResult],
    save_path: Path | str | None = None,
    title: str | None = None,
):
    """Mean nodes expanded per query against node capacity (best-first only).

    Args:
        results: List of benchmark results.
        save_path: Path to save figure.
        title: Plot title.
    """
    setup_style()
    fig, ax = plt.subplots()

    group = sorted(
        (r for r in results if r.method == "best_first"),
        key=lambda r: r.params.get("node_size", 0),
    )
    sizes = [r.params.get("node_size", 0) for r in group]
    nodes = [r.mean_nodes_expanded for r in group]
    ax.plot(sizes, nodes, "s-", color="steelblue", label="nodes expanded / query")
    for r, x, y in zip(group, sizes, nodes):
        ax.annotate(f"h={r.params.get('height', '?')}", (x, y), textcoords="offset points",
                    xytext=(5, 5), fontsize=9)

    ax.set_xscale("log", base=2)
    ax.set_xlabel("Node size")
    ax.set_ylabel("Nodes expanded per query")
    ax.set_title(title or "Traversal Cost vs Node Size")
    ax.legend()
    _finish(fig, save_path)


def plot_qps_vs_k(
    results: list[BenchmarkResult],
    save_path: Path | str | None = None,
    title: str | None = None,
):
    """QPS against k, one line per configuration.

    Args:
        results: Benchmark results from a sweep over several k.
        save_path: Path to save figure.
        title: Plot title.
    """
    setup_style()
    fig, ax = plt.subplots()

    lines: dict[str, list[BenchmarkResult]] = {}
    for r in results:
        lines.setdefault(_display_name(r), []).append(r)

    for name, group in lines.items():
        group = sorted(group, key=lambda r: r.k)
        ax.plot([r.k for r in group], [r.qps for r in group], "o-", label=name)

    ax.set_xscale("log")
    ax.set_yscale("log")
    ax.set_xlabel("k (neighbors returned)")
    ax.set_ylabel("Queries per Second (QPS)")
    ax.set_title(title or "QPS vs k")
    ax.legend()
    _finish(fig, save_path)
