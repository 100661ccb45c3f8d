import os

from bindat.conf import DEFAULT_SETTINGS_FILEPATH

os.environ['BINDAT_CONFIG_YAML'] = os.environ.get('BINDAT_TEST_CONFIG_YAML', DEFAULT_SETTINGS_FILEPATH)
