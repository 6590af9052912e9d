# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

from typing import Any, Dict, Generator, Type, TypeVar

DictS    = Dict[str, Any]
NoneType = type(None)
T        = TypeVar("T")


def deep_find_parent_classes(cls: Type) -> Generator[Type, None, None]:
    for parent in getattr(cls, "__bases__", ()):
        yield parent
        yield from deep_find_parent_classes(parent)
