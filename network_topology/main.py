"""
Main entry point for the Network Topology Module.

This module provides the command-line interface around the topology core:
reading a scan record from disk, running the transformation pipeline,
printing a summary and writing the graph report.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from .config.config_loader import ConfigLoader
from .core.data_models import ClassifiedDevice
from .core.topology_pipeline import TopologyPipeline, TransformResult
from .utils.error_handler import (
    ConfigurationError, ErrorContext, ErrorHandler, ErrorSeverity, ErrorType
)
from .utils.json_reporter import JSONReporter
from .utils.logger import LogLevel, get_logger, set_log_level

EXIT_OK = 0
EXIT_FILE_ERROR = 1
EXIT_INVALID_SCHEMA = 2
EXIT_CONFIG_ERROR = 3
EXIT_INTERRUPTED = 130


class NetworkTopologyApp:
    """
    Main application class for Network Topology Module.

    Handles the CLI workflow: configuration, input loading, pipeline execution
    and report output.
    """

    def __init__(self):
        """Initialize the application."""
        self.logger = get_logger(__name__)
        self.error_handler = ErrorHandler(self.logger)

    def _on_public_ip_detected(self, device: ClassifiedDevice) -> None:
        self.logger.warning(
            f"Public IP detected on {device.vendor} ({device.id})",
            ip=", ".join(device.ip),
        )

    def _load_scan_record(self, scan_file: str) -> Optional[Any]:
        """
        Read and parse the scan record JSON file.

        Args:
            scan_file: Path to the scan record

        Returns:
            Parsed JSON document, or None if it could not be read
        """
        try:
            with open(scan_file, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            context = ErrorContext(
                error_type=ErrorType.FILE_ERROR,
                severity=ErrorSeverity.HIGH,
                operation="load_scan_record",
                component="NetworkTopologyApp",
                additional_info={"file_path": scan_file},
            )
            self.error_handler.handle_error(e, context)
            return None

    def _validate_paths(self, config_dir: Optional[str], output_dir: Optional[str]) -> tuple:
        """
        Validate and prepare configuration and output directories.

        Args:
            config_dir: Configuration directory path
            output_dir: Output directory path

        Returns:
            tuple: (validated_config_dir, validated_output_dir), or (None, None) on error
        """
        if config_dir:
            config_path = Path(config_dir)
            if not config_path.is_dir():
                self.logger.error(f"Configuration directory does not exist: {config_dir}")
                return None, None
            validated_config_dir = str(config_path.resolve())
        else:
            validated_config_dir = str((Path(__file__).parent / "config").resolve())

        if output_dir:
            validated_output_dir = str(Path(output_dir).resolve())
        else:
            validated_output_dir = str((Path(__file__).parent / "results").resolve())

        self.logger.debug(f"Using configuration directory: {validated_config_dir}")
        self.logger.debug(f"Using output directory: {validated_output_dir}")

        return validated_config_dir, validated_output_dir

    def _print_summary(self, result: TransformResult) -> None:
        """Print the classified devices and per-zone counts."""
        self.logger.section("TOPOLOGY SUMMARY")

        headers = ["MAC", "Vendor", "Zone", "Public IP", "Status"]
        widths = [17, 28, 11, 9, 8]
        self.logger.table_header(headers, widths)
        for device in result.graph.device_nodes():
            self.logger.table_row(
                [
                    device.id,
                    device.vendor[:28],
                    device.zone.value,
                    "yes" if device.has_public_ip else "no",
                    "active" if device.is_active else "inactive",
                ],
                widths,
                highlight=device.has_public_ip,
            )

        self.logger.zone_summary(result.statistics.zone_counts, result.statistics.public_ip_devices)

    def run(self, args: argparse.Namespace) -> int:
        """
        Run the network topology application.

        Args:
            args: Parsed command line arguments

        Returns:
            int: Exit code
        """
        try:
            config_dir, output_dir = self._validate_paths(args.config_dir, args.output_dir)
            if config_dir is None:
                return EXIT_FILE_ERROR

            config_loader = ConfigLoader(config_dir, strict=args.strict)
            try:
                classifier_config = config_loader.load_classifier_config()
                graph_config = config_loader.load_graph_config()
            except ConfigurationError as e:
                context = ErrorContext(
                    error_type=ErrorType.CONFIGURATION_ERROR,
                    severity=ErrorSeverity.HIGH,
                    operation="load_config",
                    component="NetworkTopologyApp",
                    additional_info={"config_file": config_dir},
                )
                self.error_handler.handle_error(e, context)
                return EXIT_CONFIG_ERROR

            pipeline = TopologyPipeline(
                classifier_config=classifier_config,
                graph_config=graph_config,
                logger=self.logger,
                on_public_ip_detected=self._on_public_ip_detected,
            )

            raw = self._load_scan_record(args.scan_file)
            if raw is None:
                return EXIT_FILE_ERROR

            result = pipeline.run(raw)
            if not result.success:
                self.logger.error(f"Scan record rejected: {result.error}")
                return EXIT_INVALID_SCHEMA

            reporter = JSONReporter(output_dir)
            if args.stdout:
                print(reporter.to_json(result))
            else:
                self._print_summary(result)
                report_path = reporter.generate_report(result, source=args.scan_file)
                self.logger.success(f"Topology report saved to: {report_path}")

            return EXIT_OK

        except KeyboardInterrupt:
            self.logger.warning("Interrupted by user")
            return EXIT_INTERRUPTED


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the command line argument parser.

    Returns:
        argparse.ArgumentParser: Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="network_topology",
        description="Network Topology Module - Build a zone-classified graph from a network scan record",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m network_topology scan.json                          # Write report to network_topology/results/
  python -m network_topology scan.json --output-dir ./reports   # Use custom output directory
  python -m network_topology scan.json --config-dir ./configs   # Use custom config directory
  python -m network_topology scan.json --stdout                 # Print graph JSON to stdout
  python -m network_topology scan.json --strict                 # Reject invalid configuration values
        """
    )

    parser.add_argument(
        "scan_file",
        help="Scan record JSON file ([{\"mac_data\": [...]}])"
    )

    parser.add_argument(
        "--config-dir",
        type=str,
        help="Directory containing configuration files (classifier_config.yml, graph_config.yml). "
             "Defaults to network_topology/config/"
    )

    parser.add_argument(
        "--output-dir",
        type=str,
        help="Directory for output JSON reports. Defaults to network_topology/results/"
    )

    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on invalid configuration values instead of falling back to defaults"
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the graph JSON to stdout instead of writing a report file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging output"
    )

    parser.add_argument(
        "--version",
        action="version",
        version="Network Topology Module 1.0.0"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the Network Topology Module.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if args.stdout:
        # Keep stdout clean for the JSON document
        set_log_level(LogLevel.ERROR)
    elif args.verbose:
        set_log_level(LogLevel.DEBUG)
    else:
        set_log_level(LogLevel.INFO)

    app = NetworkTopologyApp()
    return app.run(args)


if __name__ == "__main__":
    sys.exit(main())
