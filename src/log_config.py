import logging
import logging.config

import structlog
from structlog.typing import Processor


def build_renderer(json_logs: bool, colors: bool) -> Processor:
    """Pick the processor rendering the final event dict.

    Args:
        json_logs: render one JSON object per line instead of key-value text.
        colors: whether the key-value renderer should colorize the output.
    """
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=colors)


def configure_loggers(
    log_level: str,
    json_logs: bool = False,
    colors: bool = True,
) -> None:
    """Setup and unify logging and structlog configuration.

    Both structlog and stdlib loggers end in a single stderr handler, so log
    lines never mix with the fee rate values the cli prints on stdout. When the
    cli prints JSON results, log lines are JSON too.

    Args:
        log_level: The level at which to configure the loggers.
        json_logs: Whether log lines are rendered as JSON objects.
        colors: Whether the console renderer should colorize the output.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%dT%H:%M:%S%z"),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "stderr": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        structlog.processors.format_exc_info,
                        build_renderer(json_logs, colors),
                    ],
                    # records emitted through the stdlib logging api
                    "foreign_pre_chain": [
                        *shared_processors,
                        structlog.stdlib.ExtraAdder(),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "formatter": "stderr",
                    "stream": "ext://sys.stderr",
                }
            },
            "loggers": {
                "": {
                    "handlers": ["stderr"],
                    "level": log_level.upper(),
                    "propagate": False,
                }
            },
        }
    )
