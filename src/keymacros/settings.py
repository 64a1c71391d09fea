# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
from __future__ import annotations

import dataclasses
import datetime
import logging
import pathlib
import typing

import cattrs
from cattrs.errors import BaseValidationError

from .device.xinput import AllOf, Always, DeviceFilter, NameContains, NameExcludes, ProductIs, VendorIs
from .durations import format_duration, to_timedelta
from .matcher import DEFAULT_DELAY, DEFAULT_QUIT_COMMAND

if typing.TYPE_CHECKING:
    from .config import Value

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off"}


def structure_bool(value, _typ) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.lower() in TRUTHY | FALSY:
        return value.lower() in TRUTHY
    raise ValueError(f"Expected a boolean, got {value!r}")


def structure_int(value, _typ) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Expected an integer, got {value!r}")
    return value


def structure_delay(value, _typ) -> datetime.timedelta:
    delay = to_timedelta(value)
    if delay < datetime.timedelta():
        raise ValueError(f"Delay can not be negative, got {format_duration(delay)}")
    return delay


settings_converter = cattrs.Converter()
settings_converter.register_unstructure_hook(datetime.timedelta, format_duration)
settings_converter.register_structure_hook(datetime.timedelta, structure_delay)
settings_converter.register_structure_hook(bool, structure_bool)
settings_converter.register_structure_hook(int, structure_int)
settings_converter.register_structure_hook(pathlib.Path, lambda v, _: pathlib.Path(v).expanduser())
settings_converter.register_unstructure_hook(pathlib.Path, str)


@dataclasses.dataclass(kw_only=True, frozen=True)
class Settings:
    delay: datetime.timedelta = DEFAULT_DELAY
    quit_command: str = DEFAULT_QUIT_COMMAND
    vid: typing.Optional[int] = None
    pid: typing.Optional[int] = None
    name: typing.Optional[str] = None
    exclude: typing.Optional[str] = None
    device: typing.Optional[pathlib.Path] = None
    restart_on_mismatch: bool = False
    float_device: bool = True

    @classmethod
    def from_values(cls, values: dict[str, Value]) -> Settings:
        """Build settings from a config file's key/value table.

        Unknown keys and values of the wrong type are logged and left at their defaults.
        """
        hints = typing.get_type_hints(cls)
        structured = {}
        for key, value in values.items():
            if key not in hints:
                logger.warning("Ignoring unknown setting %r", key)
                continue
            if value is None:
                if type(None) in typing.get_args(hints[key]):
                    structured[key] = None
                else:
                    logger.warning("Setting %s can not be None", key)
                continue
            try:
                structured[key] = settings_converter.structure(value, hints[key])
            except (ValueError, TypeError, BaseValidationError) as exc:
                logger.warning("Ignoring setting %s = %r: %s", key, value, exc)
        return cls(**structured)

    def override(self, **changes) -> Settings:
        return dataclasses.replace(self, **{k: v for k, v in changes.items() if v is not None})

    def device_filter(self) -> DeviceFilter:
        filters: list[DeviceFilter] = []
        if self.vid is not None:
            filters.append(VendorIs(vid=self.vid))
        if self.pid is not None:
            filters.append(ProductIs(pid=self.pid))
        if self.name is not None:
            filters.append(NameContains(text=self.name))
        if self.exclude is not None:
            filters.append(NameExcludes(text=self.exclude))
        if not filters:
            return Always()
        return AllOf(filters=tuple(filters))

    def describe(self) -> dict[str, typing.Any]:
        return settings_converter.unstructure(self)

