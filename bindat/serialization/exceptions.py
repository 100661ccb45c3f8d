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


class SerializationError(Exception):
    """Base class for errors raised by the serialization layer."""
    pass


class OutOfDataError(SerializationError):
    """Raised when the source ends before the requested amount of bytes could be read.

    A truncated record always surfaces as this error, it is never wrapped by the decoder.
    """
    pass


class BadDataError(SerializationError):
    """Raised when the bytes read cannot be interpreted, for example an unknown tag in strict mode."""
    pass


class TooLongError(BadDataError):
    """Raised when a length prefix is above the maximum accepted length."""
    pass
