import sys
import time
import logging

from .cli import parse_cmdline_args
from .utilities.affected_targets import Context
from .utilities.build_workflows import format_duration
from .exceptions import (
    TargetDeterminatorError,
    ConfigurationError,
    FileSystemError,
    ProcessError,
    ValidationError,
)
from .handlers import (
    handle_affected,
    handle_drive,
)


def main() -> int:
    """
    Main function to parse arguments, set up logging, build the workspace
    context, and dispatch to the appropriate command handler.
    Returns an exit code (0 for success, non-zero for failure).
    """
    start_time = time.monotonic()
    exit_code = 1 # Default to failure
    logger = None

    try:
        params = parse_cmdline_args()

        # Setup logging
        log_level = getattr(logging, params.log.upper(), logging.INFO)
        logging.basicConfig(level=log_level,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                            handlers=[logging.FileHandler("target-determinator-log.txt", mode='w')],
                            force=True)

        # stdout is reserved for command output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
        console_handler.setLevel(log_level)
        logging.getLogger().addHandler(console_handler)

        logger = logging.getLogger("target-determinator")
        logger.debug("Parsed parameters: %s", params)

        context = Context(
            workspace_path=params.working_directory,
            bazel_path=params.bazel,
            query_options=params.bazel_query_options,
        )

        # --- Command Dispatch ---
        COMMAND_HANDLERS = {
            "affected": handle_affected,
            "drive": handle_drive,
        }

        handler = COMMAND_HANDLERS.get(params.command)

        if handler:
            handler(context, params) # Handlers raise exceptions on failure
            exit_code = 0
        else:
            # argparse rejects unknown commands, this only guards the dispatch table
            logger.error(f"Unknown command '{params.command}' encountered in main dispatch.")
            exit_code = 1

    # --- Unified Exception Handling ---
    except (ConfigurationError, ValidationError) as e:
        # Errors due to user input/setup, no traceback needed in the log
        print(f"Error: {e.message}", file=sys.stderr)
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=False)
        return 1
    except ProcessError as e:
        # Bazel's own exit code is more useful to CI than a generic failure
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        if isinstance(e.code, int) and e.code > 0:
            return e.code
        return 1
    except FileSystemError as e:
        if logger: logger.error("%s: %s", type(e).__name__, e.message, exc_info=True)
        return 1
    except TargetDeterminatorError as e:
        if logger: logger.error("Unhandled TargetDeterminatorError: %s", e.message, exc_info=True)
        return 1
    except Exception as e:
        print(f"Unexpected Error: {e}", file=sys.stderr)
        if logger: logger.critical("Unexpected error occurred", exc_info=True)
        return 1
    finally:
        duration_str = format_duration(time.monotonic() - start_time)
        if logger: logger.info("Total execution time: %s", duration_str)

    return exit_code
