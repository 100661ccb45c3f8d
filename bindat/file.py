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

"""
Persistence of a batch to a named file.

The file is opened for the duration of the call only, failures to open or create it are the plain `OSError` raised by
`open()`.
"""

import os
from typing import Any, Optional, Union

from structlog import get_logger

from bindat.batch import decode_batch, encode_batch
from bindat.conf.settings import BindatSettings
from bindat.serialization import Deserializer, Serializer

logger = get_logger()

PathLike = Union[str, os.PathLike]


def dump(path: PathLike, value: Any, *values: Any, settings: Optional[BindatSettings] = None) -> None:
    """ Create or truncate the file at `path` and write the values as a batch."""
    with open(path, 'wb') as fp:
        serializer = Serializer.build_stream_serializer(fp)
        encode_batch(serializer, (value, *values), settings=settings)
    logger.debug('batch dumped', path=os.fspath(path), count=1 + len(values))


def load(path: PathLike, type_: Any, *types: Any, settings: Optional[BindatSettings] = None) -> list[Any]:
    """ Read one value per destination type from the file at `path`, in order.

    Bytes after the last record requested are left unread.
    """
    with open(path, 'rb') as fp:
        deserializer = Deserializer.build_stream_deserializer(fp)
        return decode_batch(deserializer, (type_, *types), settings=settings)
