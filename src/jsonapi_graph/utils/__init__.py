from .types import UNSPECIFIED, UnspecifiedType  # noqa
from .typing import is_sequence  # noqa
