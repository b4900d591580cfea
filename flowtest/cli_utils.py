"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from typing import Iterator
from .progress import get_progress
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command(streaming: bool = False):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporting on stderr
    - Clean JSON output on stdout
    - Automatic --verbose/-v flag
    - Automatic --quiet/-q flag to suppress data output
    - Consistent error handling

    Args:
        streaming: If True, output JSONL as items are processed.
                  If False, collect results and output at end.
    """
    def decorator(func):

        @wraps(func)
        def wrapper(*args, **kwargs):
            verbose = kwargs.get('verbose', False)
            quiet = kwargs.get('quiet', False)

            progress = get_progress(enabled=verbose or None)
            kwargs['progress'] = progress

            try:
                result = func(*args, **kwargs)

                if isinstance(result, Iterator) and not streaming:
                    result = list(result)

                if quiet:
                    # In quiet mode, consume the generator but don't output
                    if isinstance(result, Iterator):
                        for _ in result:
                            pass
                else:
                    output_result(result)

                sys.exit(SUCCESS)

            except KeyboardInterrupt:
                progress.error("Interrupted by user")
                sys.exit(INTERRUPTED)
            except click.ClickException:
                # Click exceptions already have their exit code
                raise
            except CommandError as e:
                progress.error(str(e))
                if not quiet:
                    error_obj = {
                        "error": str(e),
                        "type": type(e).__name__,
                        "exit_code": e.exit_code
                    }
                    # Add extra fields for failed steps
                    if hasattr(e, 'step_number'):
                        error_obj['step'] = e.step_number
                        error_obj['name'] = e.step_name
                        error_obj['command'] = e.command
                        if e.stderr:
                            error_obj['stderr'] = e.stderr
                    print(json.dumps(error_obj, ensure_ascii=False), flush=True)
                sys.exit(e.exit_code)
            except Exception as e:
                progress.error(f"Command failed: {e}")
                if not quiet:
                    error_obj = {
                        "error": str(e),
                        "type": type(e).__name__
                    }
                    print(json.dumps(error_obj, ensure_ascii=False), flush=True)
                sys.exit(get_exit_code_for_exception(e))

        return wrapper
    return decorator


def output_result(result):
    """
    Standard output handler for results.

    Args:
        result: The result to output (dict, list, generator, or None when
            the command printed on its own)
    """
    if result is None:
        return
    if isinstance(result, dict):
        print(json.dumps(result, ensure_ascii=False), flush=True)
    elif isinstance(result, (Iterator, list, tuple)):
        for item in result:
            print(json.dumps(item, ensure_ascii=False), flush=True)
    else:
        print(result, flush=True)


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                           help='Force progress output and debug logging'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                         help='Suppress data output, show only progress'),
    'dry_run': click.option('--dry-run', is_flag=True,
                           help='Log the git commands without running them'),
    'dir': click.option('-d', '--dir', 'directory', default=None,
                        help='Repository working directory (default: from config)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'dry_run')
        def my_command(verbose, dry_run):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
