"""
Deserializers applied to stored values before transforms run.
"""

import json
from typing import Any, Callable, Optional

Deserializer = Callable[[Any], Any]


def json_deserializer(serialized: Any) -> Any:
    """Parse a JSON document produced by the write side."""
    return json.loads(serialized)


def identity_deserializer(data: Any) -> Any:
    return data


def json_serializer(state: Any) -> str:
    """Write-side counterpart of ``json_deserializer``."""
    return json.dumps(state)


def resolve_deserializer(serialize: Optional[bool]) -> Deserializer:
    """
    Pick the deserializer for a config's ``serialize`` option.

    Only an explicit False disables JSON parsing; None and True both
    select the JSON deserializer.
    """
    if serialize is False:
        return identity_deserializer
    return json_deserializer
