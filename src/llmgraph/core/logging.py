"""Logging configuration with pretty formatting for llmgraph."""

import logging
from typing import Optional, Dict
from enum import Enum, IntEnum
from datetime import datetime
from pydantic import BaseModel, Field

# ANSI Color Codes
class Colors:
    """ANSI color codes for pretty terminal output."""
    HEADER = '\033[95m'      # Pink
    INFO = '\033[94m'        # Blue
    SUCCESS = '\033[92m'     # Green
    WARNING = '\033[93m'     # Yellow
    ERROR = '\033[91m'       # Red
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'

PLAIN_FORMAT = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"

PRETTY_FORMAT = (
    f"{Colors.DIM}%(asctime)s{Colors.RESET} │ "
    f"%(colored_level)-40s │ "
    f"%(message)s"
)

class PrettyFormatter(logging.Formatter):
    """Formatter with colors and symbols per level."""

    level_colors = {
        'DEBUG': (Colors.DIM, '🔍'),
        'VERBOSE': (Colors.DIM, '·'),
        'INFO': (Colors.INFO, 'ℹ️'),
        'WARNING': (Colors.WARNING, '⚠️'),
        'ERROR': (Colors.ERROR, '❌'),
        'CRITICAL': (Colors.ERROR + Colors.BOLD, '🚨'),
        'LLM': (Colors.SUCCESS, '🤖'),
        'TOOL': (Colors.HEADER, '🔧')
    }

    def format(self, record):
        color, symbol = self.level_colors.get(record.levelname, (Colors.RESET, '•'))
        record.colored_level = f"{color}{symbol} {record.levelname}{Colors.RESET}"

        message = super().format(record)

        # Separator line for errors and warnings
        if record.levelno >= logging.WARNING:
            message = f"{message}\n{Colors.DIM}{'─' * 80}{Colors.RESET}"

        return message

class PrettyLogHandler(logging.StreamHandler):
    """Stream handler that stamps a short wall-clock time on each record."""

    def emit(self, record):
        try:
            record.asctime = datetime.fromtimestamp(record.created).strftime('%H:%M:%S')
            msg = self.format(record)
            self.stream.write(msg + self.terminator)
            if record.levelno >= logging.WARNING:
                self.stream.write(self.terminator)
            self.flush()
        except Exception:
            self.handleError(record)

class LogComponent(str, Enum):
    """Components that can be logged."""
    GRAPH = "llmgraph.core.graph"
    NODES = "llmgraph.core.graph.nodes"
    STATE = "llmgraph.core.graph.state"
    TOOLS = "llmgraph.core.tools"
    TRANSPORT = "llmgraph.core.transport"
    WORKFLOW = "llmgraph.workflow"

class LogLevel(IntEnum):
    """Log levels, including the custom VERBOSE, LLM and TOOL levels."""
    DEBUG = logging.DEBUG
    VERBOSE = 15  # Node transitions when not shown at INFO
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    LLM = 25   # Language-model requests and responses
    TOOL = 26  # Tool dispatch

logging.addLevelName(LogLevel.LLM, "LLM")
logging.addLevelName(LogLevel.TOOL, "TOOL")
logging.addLevelName(LogLevel.VERBOSE, "VERBOSE")

class GraphLoggingConfig(BaseModel):
    """Controls how much of a run is written to the logs."""
    show_llm_messages: bool = Field(default=True)
    show_tool_calls: bool = Field(default=True)
    show_node_transitions: bool = Field(default=False)

def configure_logging(
    default_level: LogLevel = LogLevel.INFO,
    component_levels: Optional[Dict[LogComponent, LogLevel]] = None,
    pretty: bool = True,
    log_file: Optional[str] = None
) -> None:
    """Configure the root logger and per-component levels.

    Args:
        default_level: Level for the root logger
        component_levels: Optional per-component overrides
        pretty: Use colored console output
        log_file: Optional path for an additional uncolored file log
    """
    handlers = []

    console_handler = PrettyLogHandler() if pretty else logging.StreamHandler()
    console_handler.setFormatter(
        PrettyFormatter(PRETTY_FORMAT) if pretty else logging.Formatter(PLAIN_FORMAT)
    )
    handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
        handlers.append(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(default_level.value)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for handler in handlers:
        root_logger.addHandler(handler)

    if not component_levels:
        component_levels = {
            LogComponent.GRAPH: LogLevel.INFO,
            LogComponent.NODES: LogLevel.INFO,
            LogComponent.TOOLS: LogLevel.TOOL,
            LogComponent.TRANSPORT: LogLevel.WARNING
        }

    for component, level in component_levels.items():
        logging.getLogger(component.value).setLevel(level.value)

def get_logger(component: LogComponent) -> logging.Logger:
    """Get a logger for a specific component.

    The returned logger also carries ``llm(msg)`` and ``tool(msg)`` helpers
    that log at the custom LLM and TOOL levels.
    """
    logger = logging.getLogger(component.value)
    if not hasattr(logger, "llm"):
        logger.llm = lambda msg: logger.log(LogLevel.LLM, f"{Colors.SUCCESS}{msg}{Colors.RESET}")
        logger.tool = lambda msg: logger.log(LogLevel.TOOL, f"{Colors.HEADER}{msg}{Colors.RESET}")

    return logger

def log_verbose(logger: logging.Logger, message: str) -> None:
    """Log a message at VERBOSE level."""
    if logger.isEnabledFor(LogLevel.VERBOSE):
        logger.log(LogLevel.VERBOSE, message)

