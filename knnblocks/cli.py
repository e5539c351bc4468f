"""CLI entry points for working with persisted KNN datasets."""

from typing import Optional, Sequence, Tuple
import argparse
import asyncio
import json
import logging

from knnblocks.config import Config
from knnblocks.ops.logging import configure_logging
from knnblocks.parsing.numeric import read_as_numeric_array
from knnblocks.reporting.summary import dataset_summary, write_summary_csv
from knnblocks.runtime.blocks import KNNBlocks
from knnblocks.storage.lists import JsonListStore, Target

logger = logging.getLogger(__name__)


def _open_target(config_path: Optional[str], target_id: str) -> Tuple[KNNBlocks, Target]:
    config = Config.load(config_path=config_path)
    configure_logging(target_id=target_id)
    if config_path:
        logger.info("Loaded config from %s", config_path)
    blocks = KNNBlocks(config)
    target = Target(id=target_id, lists=JsonListStore(config.data_dir, target_id))
    blocks.initialize_dataset_from_target(target)
    return blocks, target


def run_parse(text: str) -> int:
    print(json.dumps(read_as_numeric_array(text)))
    return 0


def run_add(config_path: Optional[str], target_id: str, label: str, data: str) -> int:
    blocks, target = _open_target(config_path, target_id)
    status = blocks.add_example(data, label, target)
    print(status)
    return 1 if status.startswith("Failed") else 0


def run_clear(config_path: Optional[str], target_id: str, label: Optional[str]) -> int:
    blocks, target = _open_target(config_path, target_id)
    if label is None:
        print(blocks.clear_all_examples(target))
        return 0
    status = blocks.clear_examples(label, target)
    print(status)
    return 1 if status.startswith("Failed") else 0


def run_predict(config_path: Optional[str], target_id: str, data: str, k: Optional[int]) -> int:
    blocks, target = _open_target(config_path, target_id)
    neighbors = k if k is not None else blocks.config.default_k
    status = asyncio.run(blocks.predict_class(data, neighbors, target))
    print(status)
    if not status or not status.startswith("Predicted"):
        return 1
    for label in blocks.registry.store_for(target.id).store.labels():
        print(f"  {label}: {blocks.confidence(label, target):.3f}")
    return 0


def run_summary(config_path: Optional[str], target_id: str, csv_path: Optional[str]) -> int:
    blocks, target = _open_target(config_path, target_id)
    store = blocks.registry.store_for(target.id).store
    if csv_path:
        path = write_summary_csv(store, csv_path)
        logger.info("Wrote summary to %s", path)
    frame = dataset_summary(store)
    print(frame.to_string(index=False) if not frame.empty else "No examples added")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="KNN blocks dataset CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    parse = subparsers.add_parser("parse", help="Show how a numeric text is read")
    parse.add_argument("text", help="Numeric text, e.g. '[1 2] [3 4]'")

    add = subparsers.add_parser("add", help="Add a labeled example")
    add.add_argument("--config", dest="config_path", help="Path to config file")
    add.add_argument("--target", dest="target_id", required=True, help="Target id")
    add.add_argument("--label", dest="label", required=True, help="Example label")
    add.add_argument("data", help="Feature values")

    clear = subparsers.add_parser("clear", help="Clear one label, or every label")
    clear.add_argument("--config", dest="config_path", help="Path to config file")
    clear.add_argument("--target", dest="target_id", required=True, help="Target id")
    clear.add_argument("--label", dest="label", help="Label to clear (default: all)")

    predict = subparsers.add_parser("predict", help="Classify feature values")
    predict.add_argument("--config", dest="config_path", help="Path to config file")
    predict.add_argument("--target", dest="target_id", required=True, help="Target id")
    predict.add_argument("--k", dest="k", type=int, help="Number of nearest neighbors")
    predict.add_argument("data", help="Feature values")

    summary = subparsers.add_parser("summary", help="Summarize stored examples")
    summary.add_argument("--config", dest="config_path", help="Path to config file")
    summary.add_argument("--target", dest="target_id", required=True, help="Target id")
    summary.add_argument("--csv", dest="csv_path", help="Also write the summary to CSV")

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "parse":
        return run_parse(args.text)
    if args.command == "add":
        return run_add(args.config_path, args.target_id, args.label, args.data)
    if args.command == "clear":
        return run_clear(args.config_path, args.target_id, getattr(args, "label", None))
    if args.command == "predict":
        return run_predict(args.config_path, args.target_id, args.data, getattr(args, "k", None))
    if args.command == "summary":
        return run_summary(args.config_path, args.target_id, getattr(args, "csv_path", None))

    parser.error("Unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
