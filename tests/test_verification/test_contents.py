# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

import json
from datetime import datetime

from pytest import raises

from keyverify.core.contents import InvalidContent
from keyverify.core.data import JSONLoadError, UnknownVariant
from keyverify.core.utils import DictS
from keyverify.verification import (
    CancelCode, HashAlgorithm, KeyAgreementProtocol, MessageAuthenticationCode,
    ShortAuthenticationString, VerificationMethod,
)
from keyverify.verification.contents import (
    SasAccept, SasKey, SasMac, SasStart, VerificationCancel,
    VerificationRequest,
)

MAC = MessageAuthenticationCode
SAS = ShortAuthenticationString


def test_request():
    source = {
        "from_device":    "ALICEDEV",
        "methods":        ["m.sas.v1"],
        "timestamp":      1600000000123,
        "transaction_id": "S0meUniqueAndOpaqueString",
    }

    request = VerificationRequest.from_dict(source)
    assert request.methods == [VerificationMethod.sas_v1]
    assert request.timestamp == datetime.fromtimestamp(1600000000.123)
    assert request.dict == source

    event = {"type": "m.key.verification.request", "content": source}
    assert VerificationRequest.matches(event)
    assert not SasStart.matches(event)


def test_request_future_methods():
    request = VerificationRequest.from_dict({
        "from_device":    "ALICEDEV",
        "methods":        ["m.qr_code.show.v1", "m.sas.v1", "m.sas.v2"],
        "timestamp":      1600000000000,
        "transaction_id": "abc",
    })

    assert request.methods == [VerificationMethod.sas_v1]


def test_start(start_event: DictS):
    assert SasStart.matches(start_event)
    assert not SasAccept.matches(start_event)

    start = SasStart.from_dict(start_event["content"])
    assert start.from_device == "ALICEDEV"
    assert start.transaction_id == "S0meUniqueAndOpaqueString"
    assert start.method is VerificationMethod.sas_v1
    assert start.hashes == [HashAlgorithm.sha256]
    assert start.message_authentication_codes == [
        MAC.hkdf_hmac_sha256, MAC.hmac_sha256,
    ]
    assert start.short_authentication_string == [SAS.decimal, SAS.emoji]
    assert start.key_agreement_protocols == [
        KeyAgreementProtocol.curve25519_hkdf_sha256,
    ]

    assert start.dict == start_event["content"]
    assert json.loads(start.json) == start_event["content"]
    assert SasStart.from_json(start.json) == start


def test_start_other_method(start_event: DictS):
    start_event["content"]["method"] = "m.reciprocate.v1"
    assert not SasStart.matches(start_event)

    del start_event["content"]["method"]
    assert not SasStart.matches(start_event)


def test_start_ignores_unknown_offers(start_event: DictS):
    content = start_event["content"]
    content["hashes"]                       = ["sha3-256", "sha256"]
    content["message_authentication_codes"] = ["hkdf-hmac-sha256.v2"]
    content["short_authentication_string"]  = ["emoji", "Decimal"]

    start = SasStart.from_dict(content)
    assert start.hashes == [HashAlgorithm.sha256]
    assert start.message_authentication_codes == []
    assert start.short_authentication_string == [SAS.emoji]


def test_start_invalid(start_event: DictS):
    content = start_event["content"]

    with raises(InvalidContent) as exc:
        SasStart.from_dict({**content, "hashes": "sha256"})

    assert isinstance(exc.value.error, JSONLoadError)
    assert exc.value.dict == {**content, "hashes": "sha256"}

    missing = {k: v for k, v in content.items() if k != "from_device"}

    with raises(InvalidContent) as exc:
        SasStart.from_dict(missing)

    assert isinstance(exc.value.error, JSONLoadError)

    with raises(InvalidContent):
        SasStart.from_dict({**content, "transaction_id": ["txn"]})

    with raises(InvalidContent):
        SasStart.from_dict({**content, "from_device": {"id": "ALICEDEV"}})


def test_accept(accept_event: DictS):
    assert SasAccept.matches(accept_event)

    accept = SasAccept.from_dict(accept_event["content"])
    assert accept.method is VerificationMethod.sas_v1
    assert accept.key_agreement_protocol is \
        KeyAgreementProtocol.curve25519_hkdf_sha256
    assert accept.hash is HashAlgorithm.sha256
    assert accept.message_authentication_code is MAC.hkdf_hmac_sha256
    assert accept.short_authentication_string == [SAS.decimal, SAS.emoji]
    assert accept.dict == accept_event["content"]

    changed = accept.but(message_authentication_code=MAC.hmac_sha256)
    assert changed.dict["message_authentication_code"] == "hmac-sha256"
    assert changed.transaction_id == accept.transaction_id


def test_accept_unknown_choice(accept_event: DictS):
    content = accept_event["content"]

    for key, bad in [
        ("key_agreement_protocol",      "Curve25519"),
        ("hash",                        "sha512"),
        ("message_authentication_code", "hkdf-hmac-sha256.v2"),
    ]:
        with raises(InvalidContent) as exc:
            SasAccept.from_dict({**content, key: bad})

        assert isinstance(exc.value.error, UnknownVariant)
        assert exc.value.error.value == bad

    with raises(InvalidContent) as exc:
        SasAccept.from_dict({**content, "short_authentication_string": [
            "emoji", "braille",
        ]})

    assert exc.value.error == UnknownVariant(SAS, "braille")


def test_build_start():
    start = SasStart(
        transaction_id               = "txn",
        from_device                  = "BOBDEV",
        key_agreement_protocols      = list(KeyAgreementProtocol),
        hashes                       = [HashAlgorithm.sha256],
        message_authentication_codes = list(MAC),
        short_authentication_string  = [SAS.emoji],
    )

    assert start.dict == {
        "method":                       "m.sas.v1",
        "transaction_id":               "txn",
        "from_device":                  "BOBDEV",
        "key_agreement_protocols":      ["curve25519",
                                         "curve25519-hkdf-sha256"],
        "hashes":                       ["sha256"],
        "message_authentication_codes": ["hkdf-hmac-sha256", "hmac-sha256"],
        "short_authentication_string":  ["emoji"],
    }


def test_matches_without_content_dict(start_event: DictS):
    for content in (None, "m.sas.v1", ["m.sas.v1"]):
        start_event["content"] = content
        assert not SasStart.matches(start_event)
        assert not SasAccept.matches(start_event)

    del start_event["content"]
    assert not SasStart.matches(start_event)


def test_accept_sas_object(accept_event: DictS):
    content = {
        **accept_event["content"],
        "short_authentication_string": {"emoji": True},
    }

    with raises(InvalidContent) as exc:
        SasAccept.from_dict(content)

    assert isinstance(exc.value.error, JSONLoadError)


def test_cancel():
    source = {
        "transaction_id": "S0meUniqueAndOpaqueString",
        "reason":         "User rejected the key verification request",
        "code":           "m.user",
    }

    cancel = VerificationCancel.from_dict(source)
    assert cancel.code is CancelCode.user
    assert cancel.dict == source
    assert VerificationCancel.matches(
        {"type": "m.key.verification.cancel", "content": source},
    )

    assert CancelCode.decode("m.key_mismatch") is CancelCode.key_mismatch
    assert str(CancelCode.unknown_transaction) == "m.unknown_transaction"


def test_cancel_custom_code():
    source = {
        "transaction_id": "abc",
        "reason":         "Device got lost",
        "code":           "org.example.lost_device",
    }

    cancel = VerificationCancel.from_dict(source)
    assert cancel.code == "org.example.lost_device"
    assert cancel.dict == source

    # Unknown codes are kept verbatim, including their case
    cancel = VerificationCancel.from_dict({**source, "code": "M.USER"})
    assert cancel.code == "M.USER"

    with raises(InvalidContent) as exc:
        VerificationCancel.from_dict({**source, "code": 1})

    assert isinstance(exc.value.error, JSONLoadError)


def test_key():
    source = {"transaction_id": "abc", "key": "fQpGIW1Snz+pwLZu6sTy2aHy"}
    key    = SasKey.from_dict(source)

    assert key.key == "fQpGIW1Snz+pwLZu6sTy2aHy"
    assert key.dict == source
    assert SasKey.matches({"type": "m.key.verification.key", "content": {}})

    with raises(InvalidContent):
        SasKey.from_dict({"transaction_id": "abc"})


def test_mac():
    source = {
        "transaction_id": "abc",
        "mac":            {"ed25519:ABCDEF": "fQpGIW1Snz+pwLZu6sTy2aHy"},
        "keys":           "2Wptgo4CwmLo/Y8B8qinxApKaCkBG2fjTWB7AbP5Uy+",
    }

    mac = SasMac.from_dict(source)
    assert mac.mac == {"ed25519:ABCDEF": "fQpGIW1Snz+pwLZu6sTy2aHy"}
    assert mac.dict == source

    with raises(InvalidContent):
        SasMac.from_dict({**source, "mac": ["fQpGIW1Snz+pwLZu6sTy2aHy"]})
