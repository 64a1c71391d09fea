# SPDX-FileCopyrightText: 2021 Rose Davidson <rose@metaclassical.com>
#
# SPDX-License-Identifier: GPL-3.0-or-later
import typing


class KeymacrosError(Exception):
    pass


class ConfigError(KeymacrosError):
    def __init__(self, message: str, line: typing.Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line

    def __str__(self):
        if self.line is not None:
            return f"line {self.line}: {self.message}"
        return self.message


class DeviceError(KeymacrosError):
    pass


class NotInContextError(KeymacrosError):
    pass
