# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

"""
parameters: deployment parameter wrappers with Key Vault secret reference support.

"""

import base64
import re
from typing import Any, Dict, NamedTuple, Optional

from knack.log import get_logger

logger = get_logger(__name__)

ParamsMap = Dict[str, dict]

KEYVAULT_SECRET_PATH_RE = re.compile(
    r"^(/subscriptions/\S+/resourceGroups/\S+/providers/Microsoft.KeyVault/vaults/\S+)"
    r"/secrets/([^/\s]+)(/(\S+))?$"
)


class KeyVaultRef(NamedTuple):
    vault_id: str
    secret_name: str
    secret_version: Optional[str] = None

    def to_dict(self) -> dict:
        result = {"keyVault": {"id": self.vault_id}, "secretName": self.secret_name}
        if self.secret_version:
            result["secretVersion"] = self.secret_version
        return result


def parse_keyvault_secret_path(value: str) -> Optional[KeyVaultRef]:
    match = KEYVAULT_SECRET_PATH_RE.match(value)
    if not match:
        return None
    return KeyVaultRef(vault_id=match.group(1), secret_name=match.group(2), secret_version=match.group(4))


def add_value(params: ParamsMap, key: str, value: Any):
    params[key] = {"value": value}


def add_keyvault_reference(
    params: ParamsMap, key: str, vault_id: str, secret_name: str, secret_version: Optional[str] = None
):
    params[key] = {
        "reference": KeyVaultRef(
            vault_id=vault_id, secret_name=secret_name, secret_version=secret_version
        ).to_dict()
    }


def add_secret(params: ParamsMap, key: str, value: Any, encode: bool = False):
    """
    Adds value as a secret parameter. Text in the form of a Key Vault secret path becomes a
    Key Vault reference, other text is inlined (base64 encoded when requested).
    """
    if not isinstance(value, str):
        add_value(params, key, value)
        return

    ref = parse_keyvault_secret_path(value)
    if not ref:
        if encode:
            value = base64.b64encode(value.encode("utf-8")).decode("utf-8")
        add_value(params, key, value)
        return

    logger.debug("Parameter '%s' resolved to secret '%s' in vault reference.", key, ref.secret_name)
    add_keyvault_reference(params, key, ref.vault_id, ref.secret_name, ref.secret_version)
