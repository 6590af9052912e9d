# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

from dataclasses import dataclass
from typing import ClassVar, Optional, Type, TypeVar, Union

from .data import JSON, JSONLoadError, Runtime, UnknownVariant
from .utils import DictS

ContentT = TypeVar("ContentT", bound="EventContent")


@dataclass
class EventContent(JSON):
    type: ClassVar[Runtime[Optional[str]]] = None

    @classmethod
    def from_dict(cls: Type[ContentT], data: DictS) -> ContentT:
        try:
            return super().from_dict(data)
        except (JSONLoadError, UnknownVariant) as e:
            raise InvalidContent(data, e)

    @classmethod
    def matches(cls, event: DictS) -> bool:
        return bool(cls.type) and cls.type == event.get("type")


@dataclass
class InvalidContent(Exception, EventContent):
    source: Runtime[DictS]
    error:  Runtime[Union[JSONLoadError, UnknownVariant]]

    @property
    def dict(self) -> DictS:
        return self.source
