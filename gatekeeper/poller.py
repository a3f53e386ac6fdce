"""Poll loop: validate every interval until the gate is green, red or timed out."""

import logging
import threading
import time

from gatekeeper.errors import ValidationCancelled, ValidationTimeout
from gatekeeper.models import Status
from gatekeeper.services.validator import StatusValidator

LOG = logging.getLogger("gatekeeper.poller")


def run_validation_loop(
    validator: StatusValidator,
    timeout_seconds: float,
    interval_seconds: float,
    cancel: threading.Event | None = None,
    log: logging.Logger | None = None,
) -> Status:
    """Call validator.validate() until every job succeeded.

    GateFailure and provider errors from validate() end the loop at once;
    only pending jobs are waited for.

    Raises:
        ValidationTimeout: If jobs are still pending after timeout_seconds
        ValidationCancelled: If cancel is set
    """
    log = log or LOG
    deadline = time.monotonic() + timeout_seconds
    tick = 0
    status: Status | None = None

    while True:
        tick += 1
        status = validator.validate(cancel=cancel)
        log.info("Validation tick %d for %s:\n%s", tick, validator.options.ref, status.detail())
        if status.is_success():
            log.info("All validations were successful")
            return status

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise ValidationTimeout(timeout_seconds, status)
        if cancel is not None:
            if cancel.wait(min(interval_seconds, remaining)):
                raise ValidationCancelled("validation cancelled")
        else:
            time.sleep(min(interval_seconds, remaining))
