from __future__ import annotations

import argparse
import json
import sys
import time

from .core.loader import validate_mapping
from .core.logging import configure_logging
from .io.jsdata import dump_implementors_js, load_implementors_file


def _serve(args: argparse.Namespace) -> int:
    from .runtime.server import run

    srv = run(
        host=args.host,
        port=args.port,
        docs_root=args.docs_root,
        open_browser=not args.no_browser,
        log_level=args.log_level,
        new_server=True,
    )
    print(srv.url)

    # Block forever (so it behaves like a normal CLI server)
    while True:
        time.sleep(3600)


def _show(args: argparse.Namespace) -> int:
    loader = load_implementors_file(args.file)
    mapping = dict(loader.mapping)
    if args.crate is not None:
        if args.crate not in mapping:
            print(f"crate {args.crate!r} not found in {args.file}", file=sys.stderr)
            return 1
        mapping = {args.crate: mapping[args.crate]}
    json.dump({"traitPath": loader.trait_path, "implementors": mapping}, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def _dump(args: argparse.Namespace) -> int:
    with open(args.file, encoding="utf-8") as f:
        mapping = validate_mapping(json.load(f))
    sys.stdout.write(dump_implementors_js(mapping))
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="implview", description="implview: trait implementor registry host")
    sub = p.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="serve the implementor API (and a docs tree)")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--docs-root", default=None, help="generated docs directory containing implementors/")
    serve.add_argument("--no-browser", action="store_true")
    serve.add_argument("--log-level", default="info")
    serve.set_defaults(func=_serve)

    show = sub.add_parser("show", help="print the mapping of one implementors .js file as JSON")
    show.add_argument("file")
    show.add_argument("--crate", default=None)
    show.set_defaults(func=_show)

    dump = sub.add_parser("dump", help="render a JSON mapping as an implementors .js file")
    dump.add_argument("file")
    dump.set_defaults(func=_dump)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(getattr(args, "log_level", None))
    return int(args.func(args))


if __name__ == "__main__":
    sys.exit(main())
