#!/usr/bin/env python3
"""
benchmark_compare.py -- Compare the Punycode codec against the
CPython built-in ``punycode`` codec.

This utility script exercises both codecs on a small suite of test
strings.  Each codec is invoked to encode and then decode the data.
The script measures the encoded length relative to the input (in code
points), the median time taken to encode and decode over several
repeats, whether the round trip is exact, and whether both codecs
produce the same encoding.  Results are collected into a pandas
DataFrame and plotted using matplotlib.

The codec under test is imported from ``punycode_final``.  The
baseline is ``str.encode('punycode')`` from the standard library
``encodings`` package, which implements the same RFC 3492 algorithm
on top of Python's unbounded integers and therefore performs no 32-bit
overflow checks.

Run this script directly to print a table of metrics and output a
PNG chart named ``punycode_comparison_plot.png`` into the working
directory.
"""

import random
import time
from typing import Callable, Dict, List, Optional, Tuple

import matplotlib
matplotlib.use('Agg') # headless backend
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from punycode_final import (
    RFC3492_VECTORS,
    encode as puny_encode,
    decode as puny_decode,
)

def builtin_encode(text: str) -> str:
    """Encode with the standard library codec, returned as ``str``."""
    return text.encode('punycode').decode('ascii')

def builtin_decode(text: str) -> str:
    """Decode with the standard library codec."""
    return text.encode('ascii').decode('punycode')

CODECS: Dict[str, Tuple[Callable[[str], str], Callable[[str], str]]] = {
    'punycode_final': (puny_encode, puny_decode),
    'builtin_punycode': (builtin_encode, builtin_decode),
}

def random_bmp_text(length: int, seed: int = 42) -> str:
    """Deterministic text drawn from ASCII letters and a few scripts."""
    rng = random.Random(seed)
    ranges = [(0x61, 0x7A), (0xC0, 0x17F), (0x400, 0x44F), (0x3041, 0x3096), (0x4E00, 0x4FFF)]
    out = []
    for _ in range(length):
        lo, hi = rng.choice(ranges)
        out.append(chr(rng.randint(lo, hi)))
    return ''.join(out)

def default_datasets() -> Dict[str, str]:
    rfc_text = ''.join(u for _name, u, _p in RFC3492_VECTORS)
    return {
        "rfc_vectors": rfc_text,
        "cyrillic_long": RFC3492_VECTORS[8][1] * 8,
        "cjk_long": RFC3492_VECTORS[6][1] * 8,
        "mostly_ascii": "internationalization-" * 10 + "éèê",
        "random_bmp": random_bmp_text(256),
    }

def _median_ms(fn: Callable[[str], str], arg: str, repeats: int) -> Tuple[float, str]:
    times = np.empty(repeats)
    result = ''
    for r in range(repeats):
        t0 = time.perf_counter()
        result = fn(arg)
        times[r] = (time.perf_counter() - t0) * 1000.0
    return float(np.median(times)), result

def measure(datasets: Dict[str, str], repeats: int = 5) -> pd.DataFrame:
    """Encode and decode every dataset with every codec.

    Returns a DataFrame with one row per (dataset, codec) pair.  The
    ``agrees`` column is true when the codec's encoding equals the one
    produced by ``punycode_final``.
    """
    results: List[Dict[str, object]] = []
    for name, text in datasets.items():
        reference: Optional[str] = None
        for codec_name, (enc, dec) in CODECS.items():
            enc_ms, encoded = _median_ms(enc, text, repeats)
            dec_ms, decoded = _median_ms(dec, encoded, repeats)
            if reference is None:
                reference = encoded
            results.append({
                'dataset': name,
                'algorithm': codec_name,
                'ratio': len(encoded) / len(text) if text else 1.0,
                'enc_ms': enc_ms,
                'dec_ms': dec_ms,
                'valid': decoded == text,
                'agrees': encoded == reference,
            })
    return pd.DataFrame(results)

def plot_results(df: pd.DataFrame, plot_path: str) -> str:
    """Grouped bar charts of ratio and timings, one group per dataset."""
    fig, axs = plt.subplots(3, 1, figsize=(8, 10))
    for ax, metric, title in zip(
        axs,
        ['ratio', 'enc_ms', 'dec_ms'],
        ['Encoded length / input length',
         'Encode Time (ms, median)',
         'Decode Time (ms, median)']):
        subset = df.pivot(index='dataset', columns='algorithm', values=metric)
        x = np.arange(len(subset.index))
        bar_width = 0.8 / max(1, len(subset.columns))
        for i, algo in enumerate(subset.columns):
            ax.bar(x + i * bar_width, subset[algo].values, bar_width, label=algo)
        ax.set_xticks(x + bar_width * (len(subset.columns) - 1) / 2)
        ax.set_xticklabels(list(subset.index), fontsize='small')
        ax.set_title(title)
        ax.set_ylabel(metric)
        ax.legend(loc='best', fontsize='small')
    plt.tight_layout()
    plt.savefig(plot_path, dpi=150)
    plt.close(fig)
    return plot_path

def run_benchmarks(datasets: Optional[Dict[str, str]] = None, repeats: int = 5,
                   plot_path: str = 'punycode_comparison_plot.png'):
    """Run the comparison and write the plot.

    Returns the DataFrame and the path of the PNG written.
    """
    if datasets is None:
        datasets = default_datasets()
    df = measure(datasets, repeats=repeats)
    plot_results(df, plot_path)
    print(df)
    print(f"Plot written to {plot_path}")
    return df, plot_path


if __name__ == '__main__':
    run_benchmarks()
