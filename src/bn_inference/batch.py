"""
Batch query runner and command-line interface.

Input file layout:

    alarm_net.xml
    P(B=T|J=T,M=T),1
    P(B=T|J=T,M=T),2
    P(J=T|B=T),3

The first line names the network file. Each following line is a query with the
algorithm to answer it with (1 brute force, 2 variable elimination in name
order, 3 variable elimination in weight order). Every answer is written on its
own line to the output file as "<probability>,<additions>,<multiplications>".

CLI:
    bn-infer input.txt -o output.txt
    bn-infer input.txt --compare --compare-out comparison.csv
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import pandas as pd
from tqdm import tqdm

from .config import InferenceConfig, load_config
from .cpd_utils import cpd_to_ascii_table
from .exceptions import InferenceError
from .inference_discrete import ALGORITHMS, format_probability, run_query
from .logging_config import configure_logging
from .network import Network
from .query_parsing import parse_query_line
from .xml_network import load_network

logger = logging.getLogger(__name__)

INVALID_INPUT = "Invalid input"


def read_input(input_path: Union[str, Path]) -> Tuple[Path, List[str]]:
    """Return (network path, query lines) from a batch input file.

    The network path is taken as written when it exists, otherwise relative to
    the directory of the input file. Blank query lines are skipped.
    """
    input_path = Path(input_path)
    lines = input_path.read_text(encoding="utf-8").splitlines()
    if not lines or not lines[0].strip():
        raise ValueError(f"{input_path} does not start with a network file path")

    network_path = Path(lines[0].strip())
    if not network_path.exists():
        network_path = input_path.parent / network_path
    queries = [line.strip() for line in lines[1:] if line.strip()]
    return network_path, queries


def answer_line(network: Network, line: str, config: InferenceConfig) -> Optional[str]:
    """Answer one query line, or return None when it cannot be answered."""
    try:
        names, values, algorithm = parse_query_line(line)
    except InferenceError as e:
        logger.warning("Skipping %r: %s", line, e)
        return None

    if algorithm is None:
        algorithm = config.default_algorithm
    if algorithm not in ALGORITHMS:
        logger.warning("Skipping %r: unknown algorithm %d", line, algorithm)
        return None

    try:
        result = run_query(network, names, values, algorithm)
    except InferenceError as e:
        logger.warning("Skipping %r: %s", line, e)
        return None
    return result.format(config.precision)


def run_batch(
    input_path: Union[str, Path],
    output_path: Union[str, Path, None] = None,
    config: Optional[InferenceConfig] = None,
) -> List[str]:
    """Answer every query of an input file and write the answers, one per line.

    Lines that cannot be answered print "Invalid input" and produce no output
    line. Returns the lines written.
    """
    config = config or InferenceConfig()
    network_path, queries = read_input(input_path)
    network = load_network(network_path)

    answers: List[str] = []
    for line in tqdm(queries, desc="Answering queries", disable=not config.show_progress):
        answer = answer_line(network, line, config)
        if answer is None:
            tqdm.write(INVALID_INPUT)
            continue
        answers.append(answer)

    out = Path(output_path if output_path is not None else config.output_path)
    out.write_text("".join(f"{a}\n" for a in answers), encoding="utf-8")
    logger.info("Wrote %d answers for %d queries to %s", len(answers), len(queries), out)
    return answers


def compare_algorithms(network: Network, queries: Iterable[str], precision: int = 5) -> pd.DataFrame:
    """Answer every query with all three algorithms, one row per (query, algorithm).

    A trailing ",<algorithm>" on a query is ignored. Lines that cannot be answered
    are logged and skipped. Columns: query, algorithm, probability, formatted,
    additions, multiplications.
    """
    records = []
    for line in queries:
        try:
            names, values, _ = parse_query_line(line)
            results = [run_query(network, names, values, number) for number in sorted(ALGORITHMS)]
        except InferenceError as e:
            logger.warning("Skipping %r: %s", line, e)
            continue
        query_text = line.rsplit(")", 1)[0] + ")"
        for result in results:
            records.append({
                "query": query_text.strip(),
                "algorithm": result.algorithm,
                "probability": result.probability,
                "formatted": format_probability(result.probability, precision),
                "additions": result.additions,
                "multiplications": result.multiplications,
            })
    return pd.DataFrame(
        records,
        columns=["query", "algorithm", "probability", "formatted", "additions", "multiplications"],
    )


def save_comparison(df: pd.DataFrame, path: Union[str, Path]) -> Path:
    """Write a comparison table as parquet (".parquet") or CSV (anything else)."""
    path = Path(path)
    if path.suffix == ".parquet":
        df.to_parquet(path, index=False)
    else:
        df.to_csv(path, index=False)
    return path


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Exact inference on discrete Bayesian networks with operation counts")
    parser.add_argument("input", type=Path, help="Input file: network path on the first line, one query per line after")
    parser.add_argument("-o", "--output", type=str, default=None, help="Output file (default from config: output.txt)")
    parser.add_argument("--config", type=Path, default=None, help="YAML run configuration")
    parser.add_argument("--compare", action="store_true", help="Run all three algorithms per query and print a table")
    parser.add_argument("--compare-out", type=Path, default=None, help="Save the comparison table (.csv or .parquet)")
    parser.add_argument("--show-cpts", action="store_true", help="Print every CPT of the network before answering")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default from config: WARNING)",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _build_parser().parse_args(argv)

    config = load_config(args.config).override(
        output_path=args.output,
        log_level=args.log_level,
        show_progress=False if args.no_progress else None,
    )
    configure_logging(config.log_level)

    if args.show_cpts or args.compare:
        network_path, queries = read_input(args.input)
        network = load_network(network_path)

        if args.show_cpts:
            for var in network:
                print(cpd_to_ascii_table(network, var.name))
                print()

        if args.compare:
            df = compare_algorithms(network, queries, precision=config.precision)
            print(df.to_string(index=False))
            if args.compare_out is not None:
                saved = save_comparison(df, args.compare_out)
                print(f"✓ Saved comparison to {saved}")
            return

    answers = run_batch(args.input, config=config)
    print(f"✓ Wrote {len(answers)} answers to {config.output_path}")


if __name__ == "__main__":
    main()


__all__ = [
    "INVALID_INPUT",
    "read_input",
    "answer_line",
    "run_batch",
    "compare_algorithms",
    "save_comparison",
    "main",
]
