import json
import logging
from dataclasses import dataclass

from .exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Argument:
    name: str
    is_optional: bool = False


ArgumentSpec = tuple[Argument, ...]


def parse_json_object(json_text: str | None) -> dict:
    """Parse a JSON query string, anything but an object counts as no fields at all."""
    try:
        payload = json.loads(json_text) if json_text else None
    except (TypeError, ValueError, RecursionError):
        logger.debug(f"unparsable json query: {json_text!r}")
        return {}
    return payload if isinstance(payload, dict) else {}


def bind_arguments(json_text: str | None, spec: ArgumentSpec) -> list:
    """
    Build the positional arguments of a remote operation from a JSON query string.

    Values are taken in the declared order of `spec`, not in the order of the
    input keys. A key set to null counts as present. Absent optional arguments
    are left out, so the result can be shorter than `spec`.

    Raises:
        ValidationError: naming the first required argument missing, in declared order
    """
    payload = parse_json_object(json_text)
    args = []
    for arg in spec:
        if arg.name in payload:
            args.append(payload[arg.name])
            logger.debug(f"arg {arg.name} set to {payload[arg.name]!r}")
        elif not arg.is_optional:
            raise ValidationError(arg.name)
        else:
            logger.debug(f"ignore arg {arg.name}")
    return args
