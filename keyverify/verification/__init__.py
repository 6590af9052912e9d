# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

"""Algorithms and methods used by `m.key.verification.*` events."""

from ..core.data import WireEnum as _WireEnum


class HashAlgorithm(_WireEnum):
    sha256 = "sha256"


class KeyAgreementProtocol(_WireEnum):
    curve25519             = "curve25519"
    curve25519_hkdf_sha256 = "curve25519-hkdf-sha256"


class MessageAuthenticationCode(_WireEnum):
    hkdf_hmac_sha256 = "hkdf-hmac-sha256"
    hmac_sha256      = "hmac-sha256"


class ShortAuthenticationString(_WireEnum):
    decimal = "decimal"
    emoji   = "emoji"


class VerificationMethod(_WireEnum):
    sas_v1 = "m.sas.v1"


class CancelCode(_WireEnum):
    user                = "m.user"
    timeout             = "m.timeout"
    unknown_transaction = "m.unknown_transaction"
    unknown_method      = "m.unknown_method"
    unexpected_message  = "m.unexpected_message"
    key_mismatch        = "m.key_mismatch"
    user_mismatch       = "m.user_mismatch"
    invalid_message     = "m.invalid_message"
    accepted            = "m.accepted"
