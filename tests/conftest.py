# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

from pytest import fixture

from keyverify.core.utils import DictS


@fixture
def start_event() -> DictS:
    return {
        "type":    "m.key.verification.start",
        "sender":  "@alice:example.org",
        "content": {
            "from_device":                  "ALICEDEV",
            "method":                       "m.sas.v1",
            "transaction_id":               "S0meUniqueAndOpaqueString",
            "key_agreement_protocols":      ["curve25519-hkdf-sha256"],
            "hashes":                       ["sha256"],
            "message_authentication_codes": [
                "hkdf-hmac-sha256", "hmac-sha256",
            ],
            "short_authentication_string":  ["decimal", "emoji"],
        },
    }


@fixture
def accept_event() -> DictS:
    return {
        "type":    "m.key.verification.accept",
        "sender":  "@bob:example.org",
        "content": {
            "method":                      "m.sas.v1",
            "transaction_id":              "S0meUniqueAndOpaqueString",
            "key_agreement_protocol":      "curve25519-hkdf-sha256",
            "hash":                        "sha256",
            "message_authentication_code": "hkdf-hmac-sha256",
            "short_authentication_string": ["decimal", "emoji"],
            "commitment": "fQpGIW1Snz+pwLZu6sTy2aHy/DYWWTspTJRPyNp0PKk",
        },
    }
