"""
Command-line entrypoint.

Sub-commands:
- ``serve``: run the calculator RPC server
- ``call OP A B``: run one operation against a running server
- ``run FILE``: start a server process, run every operation of FILE against it,
  write the results next to FILE and stop the server
"""

import argparse
from multiprocessing import Process
from pathlib import Path
import sys
import time
from typing import List, Optional

from pydantic import BaseModel, FilePath, ValidationError

from calculator_rpc.client.client import CalculatorClient
from calculator_rpc.common.config import Settings, get_settings
from calculator_rpc.common.errors import RpcError
from calculator_rpc.common.logger import configure_logging
from calculator_rpc.server.server import CalculatorServer


class RunArgs(BaseModel):
    """
    Pydantic model used to validate the ``run`` arguments.

    Attributes
    ----------
    file_path : FilePath
        Path to the file containing operation lines.
    """

    file_path: FilePath


def run_server(host: str, port: int, log_level: str) -> None:
    """
    Start the calculator server.

    Used as a process target, the server runs until the process is terminated.
    """
    CalculatorServer(host=host, port=port, log_level=log_level).start()


def build_output_path(input_path: Path) -> Path:
    """
    Construct the output file path for an input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations.7z
    output: resources/operations_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "_".join(input_path.suffixes).replace(".", "_")
    # Path.stem only drops the last suffix
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser, defaults taken from ``settings``."""
    parser = argparse.ArgumentParser(
        prog="calculator-rpc",
        description="Binary (protobuf) calculator RPC over HTTP",
    )
    parser.add_argument("--host", default=str(settings.host), help="Server host address")
    parser.add_argument("--port", type=int, default=settings.port, help="Server TCP port")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")

    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("serve", help="Run the server")

    call = commands.add_parser("call", help="Run one operation")
    call.add_argument("operation", help="Operation name, e.g. add")
    call.add_argument("operand_a", type=int)
    call.add_argument("operand_b", type=int)

    run = commands.add_parser("run", help="Run a file of operations against a local server")
    run.add_argument("file_path", help="Path to the file (or archive) containing operations")

    return parser


def _run_file(parser: argparse.ArgumentParser, args: argparse.Namespace, client: CalculatorClient) -> None:
    try:
        run_args = RunArgs(file_path=args.file_path)
    except ValidationError as exc:
        parser.error(str(exc))

    input_path: Path = Path(run_args.file_path)
    output_path: Path = build_output_path(input_path)

    server_process = Process(target=run_server, args=(args.host, args.port, args.log_level))
    server_process.start()

    # Give the server time to start listening
    time.sleep(1)

    try:
        client.send_file(input_path, output_path)
    finally:
        # Ensure the server is always stopped
        server_process.terminate()
        server_process.join()


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the ``calculator-rpc`` command.

    :return: Process exit code
    :rtype: int
    """
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        client = CalculatorClient(host=args.host, port=args.port, timeout=settings.timeout)
    except ValidationError as exc:
        parser.error(str(exc))

    if args.command == "serve":
        run_server(args.host, args.port, args.log_level)
    elif args.command == "call":
        try:
            print(client.call(args.operation, args.operand_a, args.operand_b))
        except (RpcError, ValueError) as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    else:
        _run_file(parser, args, client)
    return 0


if __name__ == "__main__":
    sys.exit(main())
