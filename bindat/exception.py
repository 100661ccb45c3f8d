# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import reprlib
from typing import Any, Optional


class BindatError(Exception):
    """Base class for exceptions in bindat."""
    pass


class UnsupportedTypeError(BindatError, TypeError):
    """Raised when no converter can be built for a type annotation."""
    pass


class EncodeError(BindatError):
    """Base class for errors raised while encoding a value."""
    pass


class EncodeValueError(EncodeError, ValueError):
    """Raised when a value cannot be represented on the wire: NaN or infinite floats, integers that don't fit 64
    bits, lengths above 32 bits or values nested too deep.
    """

    def __init__(self, value: Any, reason: str) -> None:
        super().__init__(f'cannot encode {reprlib.repr(value)}: {reason}')
        self.value = value
        self.reason = reason


class DecodeError(BindatError):
    """Base class for errors raised while decoding a record into a destination."""
    pass


class DecodeUsageError(DecodeError):
    """Raised when the destination itself is unusable, this is a programming error and not a format error."""
    pass


class DecodeTypeError(DecodeError):
    """Raised when the record read is incompatible with the destination.

    `source` describes what was read, for example `uint16(300)` or `sequence[4]`, and `shape` is the destination
    type that was asked for.
    """

    def __init__(self, source: str, shape: Any, reason: Optional[str] = None) -> None:
        message = f'cannot decode {source} into value of type {_shape_name(shape)}'
        if reason is not None:
            message = f'{message}: {reason}'
        super().__init__(message)
        self.source = source
        self.shape = shape
        self.reason = reason


def _shape_name(shape: Any) -> str:
    """ Human readable name of a destination type.

    >>> _shape_name(int)
    'int'
    >>> _shape_name(list[int])
    'list[int]'
    >>> from typing import NewType
    >>> _shape_name(NewType('Uint8', int))
    'Uint8'
    """
    if hasattr(shape, '__supertype__'):
        return shape.__name__
    if isinstance(shape, type) and not hasattr(shape, '__origin__'):
        return shape.__qualname__
    return str(shape)
