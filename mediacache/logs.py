import logging
from typing import Union

FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

QUIET_LOGGERS = ["botocore", "boto3", "urllib3", "s3transfer", "PIL"]


def configure_logging(level: Union[str, int] = logging.INFO) -> None:
    """
    Configure the root logger once per process.

    Lambda runtimes install their own handler on the root logger before any
    user code runs, so an existing handler only gets its level adjusted.
    """
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level)
    else:
        logging.basicConfig(level=level, format=FORMAT)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
