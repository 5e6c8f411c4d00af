import argparse
import json
import sys

from dotenv import load_dotenv


def _parse_option(raw: str):
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {raw!r}")
    # Let JSON literals through (true, 3, "x"); anything else is a plain string.
    try:
        return key, json.loads(value)
    except json.JSONDecodeError:
        return key, value


def build_event(args) -> dict:
    body = {}
    if args.payload:
        body.update(json.loads(args.payload))
    if args.prompt is not None:
        body["prompt"] = args.prompt
    if args.action:
        body["action"] = args.action
    for key, value in args.option or []:
        body[key] = value
    headers = {"Content-Type": "application/json"}
    if args.client_ip:
        headers["X-Forwarded-For"] = args.client_ip
    return {"httpMethod": args.method, "headers": headers, "body": json.dumps(body)}


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run one of the AI function handlers locally")
    parser.add_argument("function", choices=["gemini-ai", "ai-summary", "image-generator"])
    parser.add_argument("-p", "--prompt", help="Prompt text (gemini-ai, image-generator)")
    parser.add_argument("-a", "--action", help="Mode for gemini-ai (default: chat)")
    parser.add_argument("-o", "--option", action="append", type=_parse_option, metavar="KEY=VALUE",
                        help="Extra body field, e.g. -o storyLength=short -o contractions=false")
    parser.add_argument("--payload", help="Raw JSON body; --prompt/--action/--option are merged on top")
    parser.add_argument("--method", default="POST", help="HTTP method to simulate (default: POST)")
    parser.add_argument("--client-ip", help="Value for X-Forwarded-For (ai-summary rate limiting)")
    parser.add_argument("--output", help="Write the handler response body to this file (JSON)")
    args = parser.parse_args(argv)

    load_dotenv()
    # Import after .env is loaded so settings pick it up.
    from .handler import FUNCTIONS

    result = FUNCTIONS[args.function](build_event(args))

    body = None
    try:
        body = json.loads(result.get("body") or "null")
    except json.JSONDecodeError:
        body = result.get("body")

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump({"statusCode": result.get("statusCode"), "body": body}, f, ensure_ascii=False, indent=2)
        print(f"Wrote output to {args.output}")

    print("status:", result.get("statusCode"))
    print("body (first 1000 chars):")
    print((result.get("body") or "")[:1000])
    return 0 if result.get("statusCode", 500) < 400 else 1


if __name__ == "__main__":
    sys.exit(main())
