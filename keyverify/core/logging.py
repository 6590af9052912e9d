# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from io import StringIO
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Type, Union

from loguru._logger import Core, Logger
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text as RichText
from rich.traceback import Traceback as RichTraceback


@dataclass
class KeyVerifyLogger:
    term_level: Union[str, int] = logging.INFO
    log_file:   Optional[Path]  = None

    logger:        Logger = field(init=False, repr=False)
    _term_sink_id: int    = field(init=False, repr=False)


    def __post_init__(self) -> None:
        self._reconfigure_logging()


    def remove_terminal_logging(self) -> None:
        self.logger.remove(self._term_sink_id)


    def debug(self, msg: str, *args, depth: int = 0, **kwargs) -> None:
        self.logger.opt(depth=1 + depth).debug(msg, *args, **kwargs)


    def info(self, msg: str, *args, depth: int = 0, **kwargs) -> None:
        self.logger.opt(depth=1 + depth).info(msg, *args, **kwargs)


    def warn(self, msg: str, *args, depth: int = 0, **kwargs) -> None:
        self.logger.opt(depth=1 + depth).warning(msg, *args, **kwargs)


    def err(self, msg: str, *args, depth: int = 0, **kwargs) -> None:
        self.logger.opt(depth=1 + depth).error(msg, *args, **kwargs)


    def crit(self, msg: str, *args, depth: int = 0, **kwargs) -> None:
        self.logger.opt(depth=1 + depth).critical(msg, *args, **kwargs)


    def exception(self, msg: str, *args, depth: int = 0, **kwargs) -> None:
        self.logger.opt(depth=1 + depth).exception(msg, *args, **kwargs)


    @contextmanager
    def report(
        self,
        *types: Type[Exception],
        level:  Union[str, int]  = "WARNING",
        trace:  bool = False,
        depth:  int  = 0,
    ) -> Iterator[List[Exception]]:

        caught: List[Exception] = []

        try:
            yield caught
        except types as e:
            caught.append(e)
            logger = self.logger.opt(depth=2 + depth, exception=trace)
            logger.log(level, repr(e))


    def _reconfigure_logging(self) -> None:
        if hasattr(self, "logger"):
            self.logger.remove()

        # A logger with its own core, the global loguru.logger and the sinks
        # an application added to it are left alone
        self.logger = Logger(
            core      = Core(),
            exception = None,
            depth     = 0,
            record    = False,
            lazy      = False,
            colors    = False,
            raw       = False,
            capture   = True,
            patchers  = [],
            extra     = {},
        )

        # File logging configuration

        def file_format(record: Dict[str, Any]) -> str:
            fmt = (
                "{level} {time:YYYY-MM-DD HH:mm:ss.SSS} "
                "{name}.{function}:{line}\n{message}"
            )

            if record["exception"] is not None:
                try:
                    raise record["exception"].value
                except Exception:
                    out = StringIO()

                    Console(file=out, soft_wrap=True).print(RichTraceback(
                        indent_guides=False, show_locals=False,
                    ))

                    record["extra"]["stack"] = out.getvalue()
                    return "%s\n{extra[stack]}\n" % fmt

            return "%s\n\n" % fmt

        if self.log_file:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

            self.logger.add(
                self.log_file,
                level     = logging.NOTSET,
                backtrace = False,
                enqueue   = True,
                format    = file_format,
            )

        # Terminal logging configuration

        term_handler = TermLogHandler(
            console             = Console(file=sys.stderr, soft_wrap=True),
            log_time_format     = "%T",
            omit_repeated_times = False,
            rich_tracebacks     = True,
        )

        self._term_sink_id = self.logger.add(
            sink      = term_handler,
            level     = self.term_level,
            backtrace = False,
            format    = lambda record: "{message}",
        )


class TermLogHandler(RichHandler):
    level_names = {
        "DEBUG":    "*",
        "INFO":     "i",
        "WARNING":  "!",
        "ERROR":    "X",
        "CRITICAL": "F",
    }

    def get_level_text(self, record):
        return RichText.styled(
            self.level_names[record.levelname],
            f"logging.level.{record.levelname.lower()}",
        )


LOG = KeyVerifyLogger()
