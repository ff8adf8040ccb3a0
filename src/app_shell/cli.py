import argparse
import logging
import sys
from pathlib import Path
from typing import TextIO

from src.adapters.function_io import (
    FunctionInputError,
    parse_function_input,
    serialize_output,
)
from src.adapters.json_stream import JsonStreamAdapter
from src.components.discounts import (
    DiscountRulesConfig,
    EvaluateDiscountInput,
    EvaluateDiscountOutput,
    FunctionInputPort,
    FunctionOutputPort,
    load_config_from_rules,
    run,
)
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")

RULES_PATH = "rules.yaml"


def get_rules(path: str) -> Rules:
    rules_path = Path(path)
    if not rules_path.exists():
        logger.error(f"Rules file {rules_path} not found.")
        sys.exit(1)

    try:
        return load_rules(rules_path)
    except ValueError as e:
        logger.error(str(e))
        sys.exit(1)


def handle_evaluate(
    rules: Rules,
    args: argparse.Namespace,
    stdin: TextIO,
    stdout: TextIO,
    stderr: TextIO,
) -> None:
    config = load_config_from_rules(rules)

    if args.input:
        source_path = Path(args.input)
        if not source_path.exists():
            logger.error(f"Input file {source_path} not found.")
            sys.exit(1)
        source: TextIO = open(source_path)
    else:
        source = stdin

    adapter = JsonStreamAdapter(source=source, sink=stdout)
    try:
        result = evaluate_stream(adapter, adapter, config)
    except FunctionInputError as e:
        for err in e.errors:
            logger.error(f"{err.field or 'input'}: {err.message} ({err.code})")
        sys.exit(1)
    finally:
        if source is not stdin:
            source.close()

    if args.explain:
        print(f"mode={result.mode} reason={result.reason}", file=stderr)


def evaluate_stream(
    source: FunctionInputPort,
    sink: FunctionOutputPort,
    config: DiscountRulesConfig,
) -> EvaluateDiscountOutput:
    """Read one payload, evaluate it, write the function result."""
    cart = parse_function_input(source.read_input())
    result = run(EvaluateDiscountInput(cart=cart), config)

    if result.config_malformed:
        logger.warning("Discount config is malformed; evaluated as store credit.")

    sink.write_result(serialize_output(result))
    return result


def handle_check_rules(rules: Rules, stdout: TextIO) -> None:
    config = load_config_from_rules(rules)
    print(f"Rules OK: {rules.project.slug} (version {rules.project.rules_version})", file=stdout)
    print(f"  required_discount_class: {config.required_discount_class}", file=stdout)
    print(f"  currency_symbol: {config.currency_symbol}", file=stdout)
    print(f"  referral_message: {config.referral_message}", file=stdout)
    print(f"  store_credit_message: {config.store_credit_message}", file=stdout)


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    parser = argparse.ArgumentParser(description="Daisychain discount function CLI")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Subcommands accept --rules too; SUPPRESS keeps the global value when omitted
    rules_option = argparse.ArgumentParser(add_help=False)
    rules_option.add_argument(
        "--rules", default=argparse.SUPPRESS, help="Path to rules.yaml"
    )

    # evaluate
    evaluate_parser = subparsers.add_parser(
        "evaluate", parents=[rules_option], help="Evaluate a function input payload"
    )
    evaluate_parser.add_argument("--input", help="Path to input JSON (default: stdin)")
    evaluate_parser.add_argument(
        "--explain",
        action="store_true",
        help="Print the resolved mode and reason to stderr",
    )

    # check-rules
    subparsers.add_parser("check-rules", parents=[rules_option], help="Validate rules.yaml")

    args = parser.parse_args(argv)

    rules = get_rules(args.rules)
    logging.basicConfig(level=rules.logging.level, stream=sys.stderr)

    if args.command == "evaluate":
        handle_evaluate(
            rules,
            args,
            stdin or sys.stdin,
            stdout or sys.stdout,
            stderr or sys.stderr,
        )
    elif args.command == "check-rules":
        handle_check_rules(rules, stdout or sys.stdout)


if __name__ == "__main__":
    main()
