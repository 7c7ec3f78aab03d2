import argparse
import os
import sys
import json
from typing import Optional

from .config import TigronConfig, get_default_config_dir
from .exceptions import TigronSmsError
from .logging_config import setup_logging
from .sms_api_caller import TigronSms, send_sms


def write_file(path: str, data: bytes, mode: int = 0o600) -> None:
    with open(path, 'wb') as f:
        f.write(data)
    try:
        os.chmod(path, mode)
    except OSError:
        # chmod is best effort on non-POSIX filesystems
        pass


def cmd_send_sms(args: argparse.Namespace) -> int:
    """Send an SMS message"""
    try:
        config = TigronConfig(args.config)
        response = send_sms(config, args.message, to_number=args.to, from_number=args.from_number)

        if args.verbose:
            print(json.dumps(response, indent=2))
        else:
            print("SMS sent successfully!")
        return 0
    except TigronSmsError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_info(args: argparse.Namespace) -> int:
    """Test credentials by fetching the Tigron user info"""
    try:
        config = TigronConfig(args.config)
        with TigronSms.from_config(config) as client:
            pairs = client.user_info()
    except TigronSmsError as e:
        print(f"Connection failed: {e}", file=sys.stderr)
        return 1

    for key, pair_value in pairs:
        print(f"{key}: {pair_value}")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize the client configuration file"""
    config_dir = args.config_dir or get_default_config_dir()
    config_path = os.path.join(config_dir, "config.json")

    print(f"Initializing Tigron SMS client in: {config_dir}")

    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create config directory: {e}", file=sys.stderr)
        return 1

    if os.path.exists(config_path) and not args.force:
        print("Files already exist: config.json")
        print("Use --force to overwrite existing files")
        return 1

    config_data = {
        "username": args.username,
        "password": args.password,
        "from_number": args.from_number,
        "to_number": args.to_number,
    }
    # Remove None values
    config_data = {k: v for k, v in config_data.items() if v is not None}

    try:
        write_file(config_path, json.dumps(config_data, indent=2).encode('utf-8'), 0o600)
    except OSError as e:
        print(f"Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tigron-sms", description="Send text messages through Tigron's SOAP API")
    p.add_argument("--log-level", default=None, type=str.upper,
                   choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                   help="Logging level (default: LOG_LEVEL or WARNING)")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create the client config file", description="Create the configuration directory and a config file holding Tigron credentials and default numbers.")
    p_init.add_argument("--config-dir", help="Config directory (default: XDG_CONFIG_HOME/tigron_sms or ~/.config/tigron_sms)")
    p_init.add_argument("--username", required=True, help="Tigron API username")
    p_init.add_argument("--password", required=True, help="Tigron API password")
    p_init.add_argument("--from-number", help="Default sender, format +xx.xxxxxxxxx")
    p_init.add_argument("--to-number", help="Default recipient, format +xx.xxxxxxxxx")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing files")
    p_init.set_defaults(func=cmd_init)

    p_send = sub.add_parser("send", help="Send an SMS message", description="Send an SMS message through the Tigron API.")
    p_send.add_argument("message", help="Message to send")
    p_send.add_argument("--to", help="Recipient phone number (overrides config)")
    p_send.add_argument("--from", dest="from_number", help="Sender (overrides config)")
    p_send.add_argument("--config", default=None, help="Config file path (default: auto-detect from config directory)")
    p_send.add_argument("--verbose", "-v", action="store_true", help="Print the API response")
    p_send.set_defaults(func=cmd_send_sms)

    p_info = sub.add_parser("info", help="Show the authenticated Tigron user", description="Call user.info to check the configured credentials.")
    p_info.add_argument("--config", default=None, help="Config file path (default: auto-detect from config directory)")
    p_info.set_defaults(func=cmd_info)

    return p


def main(argv: Optional[list] = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(log_level=args.log_level)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
