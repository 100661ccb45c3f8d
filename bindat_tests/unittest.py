from typing import Any
from unittest import TestCase as _TestCase, main as ut_main

from structlog import get_logger

import bindat
from bindat.conf import STRICT_SETTINGS_FILEPATH
from bindat.conf.get_settings import get_global_settings
from bindat.conf.settings import BindatSettings

logger = get_logger()
main = ut_main

_MISSING = object()


def strict_settings() -> BindatSettings:
    return BindatSettings.from_yaml(filepath=STRICT_SETTINGS_FILEPATH)


class TestCase(_TestCase):
    def setUp(self) -> None:
        self.log = logger.new()
        self.settings = get_global_settings()

    def assertEncodesTo(self, value: Any, expected_hex: str) -> None:
        self.assertEqual(bindat.marshal(value).hex(), expected_hex.replace(' ', ''))

    def assertRoundTrip(self, value: Any, type_: Any, expected: Any = _MISSING) -> None:
        """Encode the value, decode it into `type_` and compare with `expected` (the value itself by default)."""
        data = bindat.marshal(value)
        self.log.debug('round trip', value=value, data=data.hex())
        result = bindat.unmarshal(data, type_)
        self.assertEqual(result, value if expected is _MISSING else expected)
