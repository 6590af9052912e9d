# Copyright keyverify authors & contributors
# SPDX-License-Identifier: LGPL-3.0-or-later

class KeyVerifyError(Exception):
    def __str__(self) -> str:
        return repr(self)
