import argparse
import json
import logging
import sys
from pathlib import Path

from .errors import ConfigError
from .settings import get_settings
from .store import ConfigStore

VERSION = get_settings()["version"]
LOG_FORMAT = get_settings()["log_format"]
VALUE_TYPES = ["bool", "int", "float", "string", "value"]


def setup_logging(log_level=logging.INFO, log_file=None):
    """Set up logging configuration, avoid adding multiple handlers."""
    logger = logging.getLogger()
    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)
        if log_file:
            handler = logging.FileHandler(log_file)
        else:
            handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(log_level)


def add_source_arguments(parser):
    source = parser.add_mutually_exclusive_group()
    source.add_argument("-f", "--file", help="Read this configuration file instead of searching for one", default=None)
    source.add_argument("-n", "--filename", help="Configuration filename to search for (default: config.json, or config.<ENVIRONMENT>.json)", default=None)
    parser.add_argument("--log-level", help="Set the logging level", default="WARNING")
    parser.add_argument("--log-file", help="Set the log output file", default=None)


def open_store(args):
    """Build and load a store for the source selected on the command line."""
    if args.file:
        path = Path(args.file).resolve()
        store = ConfigStore(filename=path.name, search_dirs=[path.parent])
    else:
        store = ConfigStore(filename=args.filename)
    store.load()
    return store


def lookup(store, key, group=None, value_type="value", required=False):
    accessors = store.required if required else store
    name = f"get_group_{value_type}" if group else f"get_{value_type}"
    getter = getattr(accessors, name)
    call_args = (group, key) if group else (key,)
    if required:
        return getter(*call_args), True
    return getter(*call_args)


def cmd_get(args):
    store = open_store(args)
    value, found = lookup(store, args.key, args.group, args.type, args.required)
    if not found:
        where = f"group '{args.group}'" if args.group else "root"
        logging.error(f"Key '{args.key}' ({args.type}) not found in {where}")
        return 1
    print(json.dumps(value))
    return 0


def cmd_keys(args):
    store = open_store(args)
    keys = store.group_keys(args.group) if args.group else store.keys()
    for key in sorted(keys):
        print(key)
    return 0


def cmd_check(args):
    store = open_store(args)
    print(f"{store.path}: {len(store.keys())} keys")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="confstore: inspect JSON configuration files")
    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {VERSION}')
    subparsers = parser.add_subparsers(dest="command")

    # Get Command
    parser_get = subparsers.add_parser("get", help="Print one configuration value as JSON")
    parser_get.add_argument("key", help="Key to look up")
    parser_get.add_argument("-g", "--group", help="Group (top-level object) holding the key", default=None)
    parser_get.add_argument("-t", "--type", choices=VALUE_TYPES, default="value", help="Type to read the value as (default: value)")
    parser_get.add_argument("-r", "--required", action="store_true", help="Terminate with an error when the key is missing")
    add_source_arguments(parser_get)

    # Keys Command
    parser_keys = subparsers.add_parser("keys", help="List the keys at the root or within a group")
    parser_keys.add_argument("-g", "--group", help="Group to list", default=None)
    add_source_arguments(parser_keys)

    # Check Command
    parser_check = subparsers.add_parser("check", help="Load the configuration file and report where it was found")
    add_source_arguments(parser_check)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    log_level = getattr(logging, args.log_level.upper(), logging.WARNING)
    setup_logging(log_level=log_level, log_file=args.log_file)

    commands = {"get": cmd_get, "keys": cmd_keys, "check": cmd_check}
    try:
        return commands[args.command](args)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
