from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
from typing import Any, List

from .config import ConfigError, MonitorConfig
from .core import classify, is_in_scope
from .fingerprint import fingerprint
from .interceptor import SubmissionInterceptor


def _dump(obj: Any, as_json: bool) -> None:
    if as_json:
        print(json.dumps(obj, ensure_ascii=False, indent=2))
    else:
        print(obj)


def _read_secret(args: argparse.Namespace) -> str:
    # prompt rather than take the password on the command line unless given
    return args.password if args.password is not None else getpass.getpass("Password: ")


def main(argv: List[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="passwatch", description="passwatch — weak corporate password detection.")
    p.add_argument("-v", "--verbose", action="count", default=0)
    sub = p.add_subparsers(dest="cmd", required=True)

    p_check = sub.add_parser("check", help="Classify a password as weak or strong.")
    p_check.add_argument("--password", default=None, help="Password to classify (prompted if omitted).")
    p_check.add_argument("--json", action="store_true")

    p_fp = sub.add_parser("fingerprint", help="Print the fingerprint that would be reported for a password.")
    p_fp.add_argument("--password", default=None)

    p_scope = sub.add_parser("scope", help="Tell whether an identity is monitored.")
    p_scope.add_argument("identity")

    p_submit = sub.add_parser("submit", help="Run one submission through the full pipeline.")
    p_submit.add_argument("identity")
    p_submit.add_argument("--password", default=None)
    p_submit.add_argument("--endpoint", default=None, help="Collection endpoint URL (default: PASSWATCH_ENDPOINT).")
    p_submit.add_argument("--login-type", default="form-based")
    p_submit.add_argument("--json", action="store_true")

    p_serve = sub.add_parser("serve", help="Run the collection endpoint.")
    p_serve.add_argument("--host", default=os.getenv("HOST", "0.0.0.0"))
    p_serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "3000")))

    args = p.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose > 1 else logging.INFO if args.verbose else logging.WARNING)

    try:
        config = MonitorConfig.from_env()
    except ConfigError as exc:
        p.error(str(exc))

    if args.cmd == "check":
        verdict = classify(_read_secret(args), config.common_passwords)
        _dump(verdict.to_dict(), args.json)
        return 1 if verdict.is_weak else 0

    if args.cmd == "fingerprint":
        print(fingerprint(_read_secret(args)))
        return 0

    if args.cmd == "scope":
        in_scope = is_in_scope(args.identity, config.corporate_domain_suffix)
        print("in scope" if in_scope else "out of scope")
        return 0 if in_scope else 1

    if args.cmd == "submit":
        if args.endpoint:
            try:
                config = MonitorConfig(
                    corporate_domain_suffix=config.corporate_domain_suffix,
                    collection_endpoint=args.endpoint,
                    common_passwords=config.common_passwords,
                    enabled=config.enabled,
                    timeout=config.timeout,
                )
            except ConfigError as exc:
                p.error(str(exc))
        interceptor = SubmissionInterceptor(config)
        try:
            result = interceptor.submit(args.identity, _read_secret(args), args.login_type)
            response = result.future.result() if result.future is not None else None
        finally:
            interceptor.dispatcher.close()
        out = {
            "state": result.state.value,
            "verdict": result.verdict.to_dict() if result.verdict else None,
            "event": result.event.to_wire() if result.event else None,
            "response": response,
        }
        _dump(out, args.json)
        return 0

    if args.cmd == "serve":
        import uvicorn
        from .api import create_app
        uvicorn.run(create_app(), host=args.host, port=args.port)
        return 0

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
