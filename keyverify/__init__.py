# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

from .core.data import (
    JSON, JSONLoadError, UnknownVariant, WireEnum, dump_json, load_json,
)
from .core.errors import KeyVerifyError
from .verification import (
    CancelCode, HashAlgorithm, KeyAgreementProtocol, MessageAuthenticationCode,
    ShortAuthenticationString, VerificationMethod,
)
