"""
Shared loguru setup for DOCKET runs.

Each CLI run gets its own log directory holding one ``<context>.log`` file.
The file sink keeps DEBUG detail (cache lookups, per-item tracker replies);
the console shows INFO and above. Every run opens with a provenance header
so a log can be traced back to the command and page that produced it.

Context-specific prefix wrappers live in contexts/{context}/logger.py.
"""

import sys
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from loguru import logger

import docket

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "{time:HH:mm:ss} | <level>{level: <7}</level> | <level>{message}</level>"
HEADER_RULE = "=" * 80


def setup_logger(
    context_name: str,
    log_dir: Path,
    extra_provenance: Optional[Dict[str, Any]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Route loguru output for one run to a file sink and the console.

    Args:
        context_name: Run context ("analyze", "create"); names the log file
        log_dir: Directory for this run (created if missing)
        extra_provenance: Run parameters for the header (page, project, batch file)
        console_level: Minimum level echoed to stdout

    Returns:
        Path to the log file

    Example:
        log_file = setup_logger(
            context_name="analyze",
            log_dir=Path("outs/logs/analyze_20251114_123456"),
            extra_provenance={"Page": "123456789", "Project": "PAY"},
        )
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG")
    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(context_name, extra_provenance)
    return log_file


def log_provenance(context_name: str, extra_context: Optional[Dict[str, Any]] = None) -> None:
    """Write the run header: DOCKET version, context, command line and run parameters."""
    logger.info(HEADER_RULE)
    logger.info(f"DOCKET {docket.__version__} [{context_name}]")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info(HEADER_RULE)
