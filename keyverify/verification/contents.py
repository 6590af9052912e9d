# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, ClassVar, Dict, List, Type, Union

from ..core.contents import EventContent
from ..core.data import UnknownVariant, WireEnum
from ..core.logging import LOG
from ..core.utils import DictS
from . import (
    CancelCode, HashAlgorithm, KeyAgreementProtocol, MessageAuthenticationCode,
    ShortAuthenticationString, VerificationMethod,
)


def known(enum: Type[WireEnum]) -> Callable[[Any], List[WireEnum]]:
    # Peers can advertise methods newer than ours, ignore those
    def loader(value: Any) -> List[WireEnum]:
        if not isinstance(value, list):
            raise TypeError(f"{value!r}: must be a list")

        return enum.decode_known(value)

    return loader


def known_or_custom(
    enum: Type[WireEnum],
) -> Callable[[Any], Union[WireEnum, str]]:
    # Values we don't know of are kept as plain strings
    def loader(value: Any) -> Union[WireEnum, str]:
        if not isinstance(value, str):
            raise TypeError(f"{value!r}: must be a string")

        with LOG.report(UnknownVariant, level="DEBUG"):
            return enum.decode(value)

        return value

    return loader


@dataclass
class VerificationRequest(EventContent):
    type    = "m.key.verification.request"
    loaders = {**EventContent.loaders, "methods": known(VerificationMethod)}

    from_device:    str
    methods:        List[VerificationMethod]
    timestamp:      datetime
    transaction_id: str


@dataclass
class VerificationCancel(EventContent):
    type    = "m.key.verification.cancel"
    loaders = {**EventContent.loaders, "code": known_or_custom(CancelCode)}

    transaction_id: str
    reason:         str
    code:           Union[CancelCode, str]


@dataclass
class SasContent(EventContent):
    method: ClassVar[VerificationMethod] = VerificationMethod.sas_v1

    transaction_id: str

    @classmethod
    def matches(cls, event: DictS) -> bool:
        content = event.get("content")

        if not isinstance(content, dict):
            return False

        method = content.get("method")
        return super().matches(event) and cls.method.value == method


@dataclass
class SasStart(SasContent):
    type    = "m.key.verification.start"
    loaders = {
        **EventContent.loaders,
        "key_agreement_protocols":      known(KeyAgreementProtocol),
        "hashes":                       known(HashAlgorithm),
        "message_authentication_codes": known(MessageAuthenticationCode),
        "short_authentication_string":  known(ShortAuthenticationString),
    }

    from_device:                  str
    key_agreement_protocols:      List[KeyAgreementProtocol]
    hashes:                       List[HashAlgorithm]
    message_authentication_codes: List[MessageAuthenticationCode]
    short_authentication_string:  List[ShortAuthenticationString]


@dataclass
class SasAccept(SasContent):
    type = "m.key.verification.accept"

    key_agreement_protocol:      KeyAgreementProtocol
    hash:                        HashAlgorithm
    message_authentication_code: MessageAuthenticationCode
    short_authentication_string: List[ShortAuthenticationString]
    commitment:                  str


@dataclass
class SasKey(EventContent):
    type = "m.key.verification.key"

    transaction_id: str
    key:            str  # unpadded base64 ephemeral public key


@dataclass
class SasMac(EventContent):
    type = "m.key.verification.mac"

    transaction_id: str
    mac:            Dict[str, str]  # {key_id: unpadded base64 MAC}
    keys:           str
