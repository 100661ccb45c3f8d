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

from pathlib import Path
from typing import Union

from pydantic import Field

from bindat.utils.pydantic import BaseModel


class BindatSettings(BaseModel):
    # An unknown tag byte decodes as a no-op that consumes only that byte and returns the prior value, when disabled it
    # raises BadDataError instead
    LENIENT_UNKNOWN_TAGS: bool = True

    # A nil record into a destination that can't be cleared (scalars and records) returns the prior value untouched,
    # when disabled it raises DecodeTypeError instead
    LENIENT_NIL_TARGETS: bool = True

    # Make `unmarshal` and `unmarshal_batch` fail when bytes remain after the last record
    REJECT_TRAILING_DATA: bool = False

    # Largest length prefix accepted when decoding text, bytes, sequences and mappings
    MAX_LENGTH: int = Field(default=2**32 - 1, ge=0, le=2**32 - 1)

    # Deepest nesting of sequences, mappings and records accepted when encoding or decoding
    MAX_DEPTH: int = Field(default=100, ge=1)

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'BindatSettings':
        """Takes a filepath to a yaml file and returns a validated BindatSettings instance."""
        from bindat.utils.yaml import model_from_extended_yaml
        return model_from_extended_yaml(cls, filepath=filepath)
