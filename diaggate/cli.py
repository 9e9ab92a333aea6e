import argparse
import json
import sys
from typing import List, Optional, Sequence

from diaggate import __version__
from diaggate.catalog import CatalogLoader, MessageCatalog
from diaggate.engine_core import (
    DispatchEngine,
    GateSpec,
    OutcomeKind,
    ParamSpec,
    dispatch_outcome_to_dict,
    parse_legacy_params,
)
from diaggate.engine_core.types import DispatchOutcome, param_spec_to_dict
from diaggate.errors import ConfigurationError
from diaggate.invocation import load_invocation
from diaggate.logsink import StdlibDiagnosticLogger, configure_logging
from diaggate.store import parse_property_assignments
from diaggate.transtype import transtype_check_fragment

EXIT_OK = 0
EXIT_ABORTED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="diaggate")
    sub = p.add_subparsers(dest="cmd", required=True)

    dispatch_p = sub.add_parser("dispatch", help="Evaluate a gate and dispatch a catalog message.")
    dispatch_p.add_argument("--id", dest="message_id", help="Message id")
    dispatch_p.add_argument("--if", dest="if_name", help="Only fire if this property is set")
    dispatch_p.add_argument("--unless", dest="unless_name", help="Only fire if this property is not set")
    dispatch_p.add_argument("--params", help="(deprecated) key=value;key=value parameter string")
    dispatch_p.add_argument("--param", action="append", default=[], metavar="NAME=VALUE", help="Message parameter")
    dispatch_p.add_argument("--status", type=int, help="Exit status to use when the diagnostic aborts")
    _add_common(dispatch_p)

    run_p = sub.add_parser("run", help="Dispatch an invocation file (YAML or JSON).")
    run_p.add_argument("file")
    _add_common(run_p)

    transtype_p = sub.add_parser("transtype", help="Print the transtype check condition fragment.")
    transtype_p.add_argument("--value", action="append", required=True, help="Supported transtype")
    transtype_p.add_argument("--property", default="transtype")

    catalog_p = sub.add_parser("catalog", help="Inspect the message catalog.")
    catalog_sub = catalog_p.add_subparsers(dest="catalog_cmd", required=True)
    catalog_list = catalog_sub.add_parser("list", help="List message ids")
    catalog_list.add_argument("--catalog", help="Catalog file or directory")
    catalog_show = catalog_sub.add_parser("show", help="Show one message template")
    catalog_show.add_argument("--id", dest="message_id", required=True)
    catalog_show.add_argument("--catalog", help="Catalog file or directory")

    sub.add_parser("version", help="Print version.")
    return p


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-D", dest="properties", action="append", default=[], metavar="KEY=VALUE", help="Build property")
    parser.add_argument("--catalog", help="Catalog file or directory")
    parser.add_argument("--format", default="text", choices=["text", "json"])


def _load_catalog(path: Optional[str]) -> MessageCatalog:
    return CatalogLoader(path).load()


def _param_specs(raw: List[str]) -> List[ParamSpec]:
    specs = []
    for item in raw:
        name, _, value = str(item).partition("=")
        specs.append(ParamSpec(name=name, value=value))
    return specs


def _report(outcome: DispatchOutcome, fmt: str, param_specs: Sequence[ParamSpec] = ()) -> int:
    if fmt == "json":
        payload = dispatch_outcome_to_dict(outcome)
        payload["params"] = [param_spec_to_dict(spec) for spec in param_specs]
        print(json.dumps(payload, indent=2, sort_keys=True))
    elif outcome.kind == OutcomeKind.NOOP:
        print("No diagnostic dispatched.")

    if outcome.kind == OutcomeKind.ABORTED:
        print(f"ABORTED: {outcome.record.text if outcome.record else ''}", file=sys.stderr)
        if outcome.signal is not None and outcome.signal.status is not None:
            return outcome.signal.status
        return EXIT_ABORTED
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)

    if args.cmd == "version":
        print(f"diaggate {__version__}")
        return EXIT_OK

    if args.cmd == "transtype":
        print(transtype_check_fragment(args.value, args.property))
        return EXIT_OK

    try:
        if args.cmd == "catalog":
            catalog = _load_catalog(args.catalog)
            if args.catalog_cmd == "list":
                for message_id in catalog.ids():
                    template = catalog.template(message_id)
                    print(f"{message_id}\t{template.severity if template else ''}")
                return EXIT_OK
            if args.message_id not in catalog:
                print(f"Unknown message id: {args.message_id}", file=sys.stderr)
                return EXIT_CONFIG_ERROR
            print(json.dumps(catalog.template(args.message_id).model_dump(), indent=2))
            return EXIT_OK

        configure_logging()
        store = parse_property_assignments(args.properties)
        engine = DispatchEngine(_load_catalog(args.catalog), StdlibDiagnosticLogger())

        if args.cmd == "dispatch":
            specs = _param_specs(args.param)
            outcome = engine.dispatch(
                GateSpec(if_name=args.if_name, unless_name=args.unless_name),
                args.message_id,
                store=store,
                static_params=parse_legacy_params(args.params),
                param_specs=specs,
                status=args.status,
            )
            return _report(outcome, args.format, specs)

        if args.cmd == "run":
            invocation = load_invocation(args.file)
            outcome = engine.dispatch(
                invocation.gate(),
                invocation.id,
                store=store,
                static_params=invocation.static_params(),
                param_specs=invocation.param_specs(),
                status=invocation.status,
            )
            return _report(outcome, args.format, invocation.param_specs())
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    p.print_help()
    return EXIT_CONFIG_ERROR


if __name__ == "__main__":
    raise SystemExit(main())
