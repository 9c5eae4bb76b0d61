from __future__ import annotations

import argparse
import collections
import copy
import os
from pathlib import Path
from typing import Any, Dict, OrderedDict

from tap_junit.errors import ConfigError
from tap_junit.names import NAME_MANGLE_MODES

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def parse_bool(value: str) -> bool:
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise ConfigError("Invalid boolean value {!r} -- use one of {}".format(value, ", ".join(_TRUE_VALUES + _FALSE_VALUES)))


class ConfigValue:
    def __init__(self, name: str, **kwargs):
        self.name = name
        self.value = None
        self.kwargs = kwargs
        if "default" in self.kwargs:
            self.value = self.kwargs["default"]

    def get_arg_name(self) -> str:
        name_to_use = self.name
        if "long_name" in self.kwargs:
            name_to_use = self.kwargs["long_name"]
        return name_to_use.replace("-", "_")

    def add_to_args(self, parser: argparse.ArgumentParser):
        kwargs = copy.copy(self.kwargs)
        long_name = self.name
        short_name = None
        if "long_name" in kwargs:
            long_name = kwargs.pop("long_name")
        if "short_name" in kwargs:
            short_name = kwargs.pop("short_name")
        if "action" in kwargs and kwargs["action"] in ["store_true", "store_false"]:
            if "type" in kwargs:
                del kwargs["type"]
        long_name = long_name.replace("_", "-")
        if short_name is None:
            parser.add_argument("--{}".format(long_name), **kwargs)
        else:
            parser.add_argument("-{}".format(short_name), "--{}".format(long_name), **kwargs)

    def get_value(self, args: argparse.Namespace) -> tuple[str, Any]:
        return self.name, getattr(args, self.get_arg_name())


class Config:
    """
    Configuration of the tap-junit command line tool. Every option is an attribute with a default value and an
    optional `<name>_args` dictionary that is handed to `argparse.ArgumentParser.add_argument`.
    * An option named `option_name` becomes the command line flag `--option-name`. Set `'long_name'` in the `_args`
      dict to use a different flag and `'short_name'` to add a one letter alias.
    * If the default of an option is `None` the `_args` dict has to set `'type'`.
    * Every option can also be set through the environment variable `TJ_OPTION_NAME`, or through the variable named
      by `'env_name'`. The environment only changes the default, an explicit command line flag still wins.
    * Usage:
      ```
      config = Config()
      parser = argparse.ArgumentParser('tap-junit', formatter_class=argparse.ArgumentDefaultsHelpFormatter)
      config.build_arguments(parser)
      args = parser.parse_args()
      config.extract_args(args)
      ```
    """

    def __init__(self):
        self.xml_file: Path | None = None
        self.xml_file_args = {
            "short_name": "o",
            "type": Path,
            "env_name": "JUNIT_OUTPUT_FILE",
            "help": "File the JUnit XML report is written to (junit_output.xml when not given)",
        }
        self.no_times: bool = False
        self.no_times_args = {
            "action": "store_true",
            "help": "Do not record test case times, every time is reported as 0",
        }
        self.name_mangle: str = "hudson"
        self.name_mangle_args = {
            "choices": list(NAME_MANGLE_MODES),
            "help": "How to turn test file names into suite names: hudson replaces anything but alphanumerics with "
            "underscores, perl turns directories into a dotted class hierarchy, none keeps the name",
        }
        self.raw_tap_dir: Path | None = None
        self.raw_tap_dir_args = {
            "type": Path,
            "env_name": "TAP_JUNIT_DUMP_TAP",
            "help": "Directory the raw TAP output of every test is stored in. A temporary directory is used (and "
            "removed afterwards) when not given",
        }
        self.clean_up: bool = True
        self.clean_up_args = {
            "long_name": "no_clean_up",
            "action": "store_false",
            "help": "Keep the temporary raw TAP directory",
        }
        self.merge: bool = False
        self.merge_args = {
            "short_name": "m",
            "action": "store_true",
            "help": "Merge the stderr of every test into its TAP stream",
        }
        self.kill_seconds: int = 600
        self.kill_seconds_args = {"help": "Seconds after which a test is killed"}
        self.interpreter: str | None = None
        self.interpreter_args = {
            "type": str,
            "help": "Command used to run every test (by default .py files run with this python, .t and .pl files "
            "with perl, anything else directly)",
        }
        self.pretty_print: bool = False
        self.pretty_print_args = {"short_name": "P", "action": "store_true"}
        self.log_level: str = "INFO"
        self.log_level_args = {
            "choices": ["DEBUG", "INFO", "WARNING", "ERROR"],
            "help": "Logging level",
        }
        self._env_names: Dict[str, str] = {}
        self._config_map = self._build_map()
        self._read_env()

    def _get_env_name(self, var_name: str) -> str:
        return self._env_names.get(var_name, "TJ_{}".format(var_name.upper()))

    def _options(self):
        for attr in dir(self):
            obj = getattr(self, attr)
            if attr.startswith("_") or callable(obj):
                continue
            yield attr, obj

    def _build_map(self) -> OrderedDict[str, ConfigValue]:
        config_map: OrderedDict[str, ConfigValue] = collections.OrderedDict()
        for attr, obj in self._options():
            if attr.endswith("_args"):
                name = attr[0 : -len("_args")]
                assert name in config_map
                assert isinstance(obj, dict)
                for k, v in obj.items():
                    if k == "env_name":
                        self._env_names[name] = v
                    else:
                        config_map[name].kwargs[k] = v
            else:
                # attribute_args has to be declared after the attribute
                assert attr not in config_map
                config_map[attr] = ConfigValue(attr, type=type(obj), default=obj)
        return config_map

    def _read_env(self):
        for attr, value in self._config_map.items():
            e = os.getenv(self._get_env_name(attr))
            if e is None:
                continue
            attr_type = value.kwargs["type"]
            assert type(None) != attr_type
            try:
                converted = parse_bool(e) if attr_type is bool else attr_type(e)
            except ValueError as ex:
                raise ConfigError("{}: invalid value {!r} ({})".format(self._get_env_name(attr), e, ex)) from ex
            if "choices" in value.kwargs and converted not in value.kwargs["choices"]:
                raise ConfigError(
                    "{}: invalid choice {!r} -- use one of {}".format(
                        self._get_env_name(attr), e, ", ".join(value.kwargs["choices"])
                    )
                )
            # Use the env var to supply the default value, so that if the
            # environment variable is set and the corresponding command line
            # flag is not, the environment variable has an effect.
            value.kwargs["default"] = converted
            self.__setattr__(attr, converted)

    def build_arguments(self, parser: argparse.ArgumentParser):
        for val in self._config_map.values():
            val.add_to_args(parser)

    def extract_args(self, args: argparse.Namespace):
        for val in self._config_map.values():
            k, v = val.get_value(args)
            if v is not None:
                self.__setattr__(k, v)

