"""Centralized error handler for modlists commands."""

import traceback
from collections.abc import Callable
from datetime import datetime
from functools import wraps
from typing import Any

import click

from modlists.errors import ListBuildError, SpecError
from modlists.utils.logging import logger

from .constants import ERROR_LOG_FILE
from .exit_codes import ExitCodes


def handle_exceptions(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator that logs failures, appends them to the error log and exits cleanly."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except Exception as e:
            error_type = type(e).__name__
            error_msg = str(e)

            logger.opt(exception=not isinstance(e, ListBuildError)).error(
                "Command '{cmd}' failed: {err}",
                cmd=func.__name__,
                err=error_msg,
            )

            error_log_path = ERROR_LOG_FILE
            try:
                error_log_path.parent.mkdir(parents=True, exist_ok=True)
                with open(error_log_path, "a", encoding="utf-8") as f:
                    f.write("\n" + "=" * 80 + "\n")
                    f.write(f"[{datetime.now().isoformat()}] Error in command: {func.__name__}\n")
                    f.write("=" * 80 + "\n")
                    f.write(f"{error_type}: {error_msg}\n\n")
                    f.write(traceback.format_exc())
                    f.write("=" * 80 + "\n\n")
            except OSError:
                logger.warning("Could not write error log {path}", path=str(error_log_path))

            if isinstance(e, ListBuildError):
                user_message = f"[{e.code}] {error_msg}"
            else:
                user_message = (
                    f"{error_type}: {error_msg}\n\n"
                    f"Full traceback logged to: {error_log_path}"
                )

            exc = click.ClickException(user_message)
            exc.exit_code = (
                ExitCodes.INVALID_INPUT if isinstance(e, SpecError) else ExitCodes.BUILD_FAILED
            )
            raise exc from e

    return wrapper
