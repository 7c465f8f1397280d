"""CLI entry point for cloudstore."""

from __future__ import annotations

import argparse
import csv
import io
import sys
from pathlib import Path

from loguru import logger

from cloudstore.client import StorageClient
from cloudstore.config import StorageConfig, get_config_path
from cloudstore.exceptions import CloudStoreError
from cloudstore.sorting import SortMode
from cloudstore.transfer import format_csv


class CliApp:
    """Command-line interface for cloudstore."""

    def __init__(self) -> None:
        """Initialize parser and command definitions."""
        self._parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            description="List, read and write objects in cloud storage buckets.",
        )
        parser.add_argument(
            "--config",
            default=None,
            help=(
                "Path to YAML config (default: ~/.config/cloudstore/config.yaml "
                "or CLOUDSTORE_CONFIG)."
            ),
        )
        subparsers = parser.add_subparsers(dest="command", required=True)

        self._add_buckets_parser(subparsers)
        self._add_ls_parser(subparsers)
        self._add_cat_parser(subparsers)
        self._add_put_parser(subparsers)
        self._add_setup_parser(subparsers)

        return parser

    def _add_buckets_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``buckets`` command parser."""
        parser = subparsers.add_parser("buckets", help="List bucket names.")
        parser.add_argument(
            "--project",
            "-p",
            default=None,
            help="Project ID (default: storage.project_id from config).",
        )

    def _add_ls_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``ls`` command parser."""
        parser = subparsers.add_parser("ls", help="List object keys in a bucket.")
        parser.add_argument("bucket")
        parser.add_argument("prefix", nargs="?", default="")
        parser.add_argument(
            "--folder",
            action="store_true",
            help="Treat PREFIX as a folder name (normalize slashes, list recursively).",
        )
        parser.add_argument(
            "--delimiter",
            "-d",
            default=None,
            help="Only list keys one level below PREFIX (usually '/').",
        )
        parser.add_argument(
            "--sort",
            "-s",
            default=SortMode.NONE.value,
            choices=[m.value for m in SortMode],
            help="Order of the result (default: backend order).",
        )

    def _add_cat_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``cat`` command parser."""
        parser = subparsers.add_parser("cat", help="Print or save an object.")
        parser.add_argument("bucket")
        parser.add_argument("key")
        parser.add_argument(
            "--csv",
            action="store_true",
            help="Parse the object as CSV and validate it before output.",
        )
        parser.add_argument(
            "--output",
            "-o",
            default=None,
            help="Write to this file instead of stdout.",
        )

    def _add_put_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``put`` command parser."""
        parser = subparsers.add_parser("put", help="Upload a local file.")
        parser.add_argument("bucket")
        parser.add_argument("key")
        parser.add_argument("file", help="Local file to upload ('-' for stdin).")
        parser.add_argument(
            "--csv",
            action="store_true",
            help="Parse the local file as CSV and upload normalized rows.",
        )

    def _add_setup_parser(
        self,
        subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    ) -> None:
        """Add the ``setup`` command parser."""
        parser = subparsers.add_parser(
            "setup",
            help="Save storage connection settings to the config file.",
        )
        parser.add_argument("--backend", choices=["s3", "gcs"], default=None)
        parser.add_argument("--project", "-p", default=None, help="Project ID (GCS).")
        parser.add_argument(
            "--endpoint-url",
            default=None,
            help="Custom S3 endpoint, e.g. a MinIO server.",
        )
        parser.add_argument("--region", default=None)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _run_buckets(self, client: StorageClient, args: argparse.Namespace) -> None:
        for name in client.list_buckets(args.project):
            print(name)

    def _run_ls(self, client: StorageClient, args: argparse.Namespace) -> None:
        if args.folder:
            if args.delimiter or args.sort != SortMode.NONE.value:
                sys.exit("Error: --folder cannot be combined with --delimiter/--sort.")
            names = client.list_objects_in_folder(args.bucket, args.prefix)
        else:
            names = client.list_objects(
                args.bucket,
                args.prefix,
                delimiter=args.delimiter,
                sort_mode=SortMode.parse(args.sort),
            )
        for name in names:
            print(name)

    def _run_cat(self, client: StorageClient, args: argparse.Namespace) -> None:
        if args.csv:
            rows = client.read_csv(args.bucket, args.key)
            data = format_csv(rows)
            what = f"{len(rows)} rows"
        else:
            data = client.read_bytes(args.bucket, args.key)
            what = f"{len(data)} bytes"
        if args.output:
            Path(args.output).write_bytes(data)
            logger.info(f"Saved {what} to {args.output}")
        else:
            # binary buffer: no newline translation
            sys.stdout.flush()
            sys.stdout.buffer.write(data)
            sys.stdout.flush()

    def _run_put(self, client: StorageClient, args: argparse.Namespace) -> None:
        if args.file == "-":
            data = sys.stdin.buffer.read()
        else:
            path = Path(args.file)
            if not path.is_file():
                sys.exit(f"Error: file not found: {path}")
            data = path.read_bytes()
        if args.csv:
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as e:
                sys.exit(f"Error: {args.file} is not UTF-8 text: {e}")
            rows = [row for row in csv.reader(io.StringIO(text, newline="")) if row]
            client.write_csv(args.bucket, args.key, rows)
        else:
            client.write_bytes(args.bucket, args.key, data)

    def _run_setup(self, config_path: Path, args: argparse.Namespace) -> None:
        """Merge the given settings into the config file and save it."""
        updates = {
            "backend": args.backend,
            "project_id": args.project,
            "endpoint_url": args.endpoint_url,
            "region": args.region,
        }
        cfg = StorageConfig.from_file(config_path).merge(
            StorageConfig(**{k: v for k, v in updates.items() if v is not None})
        )
        saved_path = cfg.save_to_file(config_path)
        logger.info(f"Storage backend {cfg.backend!r} configured in {saved_path}")

    def _run_command(self, client: StorageClient, args: argparse.Namespace) -> None:
        """Dispatch parsed args to the target command implementation."""
        if args.command == "buckets":
            self._run_buckets(client, args)
            return
        if args.command == "ls":
            self._run_ls(client, args)
            return
        if args.command == "cat":
            self._run_cat(client, args)
            return
        if args.command == "put":
            self._run_put(client, args)
            return
        sys.exit(f"Unknown command: {args.command}")

    def run(self, argv: list[str] | None = None) -> None:
        """Run the CLI with the given arguments."""
        args = self._parser.parse_args(argv)
        config_path = Path(args.config) if args.config else None
        try:
            if args.command == "setup":
                self._run_setup(get_config_path(config_path), args)
                return
            cfg = StorageConfig.load(config_path)
            with StorageClient(cfg) as client:
                self._run_command(client, args)
        except CloudStoreError as e:
            sys.exit(f"Error: {e}")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the ``cloudstore`` console script."""
    CliApp().run(argv)


if __name__ == "__main__":
    main()
