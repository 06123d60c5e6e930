# coding=utf-8
# ----------------------------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License file in the project root for license information.
# ----------------------------------------------------------------------------------------------

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Dict, Optional, Union

from knack.log import get_logger

from .common import TemplateNotFoundError
from .user_strings import TEMPLATE_NOT_FOUND_ERROR

logger = get_logger(__name__)

TEMPLATES_ROOT = Path(__file__).parent.joinpath("templates")


class AssetStore(ABC):
    """Read-only mapping of logical template names to raw template bytes."""

    @abstractmethod
    def get(self, name: str) -> bytes:
        pass

    def get_text(self, name: str) -> str:
        return self.get(name).decode("utf-8")


class PackagedAssetStore(AssetStore):
    def __init__(self, root: Optional[Union[str, Path]] = None):
        self.root = Path(root) if root else TEMPLATES_ROOT

    def get(self, name: str) -> bytes:
        relative = PurePosixPath(name)
        if relative.is_absolute() or ".." in relative.parts:
            raise TemplateNotFoundError(TEMPLATE_NOT_FOUND_ERROR.format(name))

        asset_path = self.root.joinpath(*relative.parts)
        if not asset_path.is_file():
            raise TemplateNotFoundError(TEMPLATE_NOT_FOUND_ERROR.format(name))

        logger.debug("Loading asset %s", asset_path)
        return asset_path.read_bytes()


class DictAssetStore(AssetStore):
    def __init__(self, assets: Dict[str, Union[str, bytes]]):
        self.assets = assets

    def get(self, name: str) -> bytes:
        if name not in self.assets:
            raise TemplateNotFoundError(TEMPLATE_NOT_FOUND_ERROR.format(name))
        asset = self.assets[name]
        if isinstance(asset, str):
            return asset.encode("utf-8")
        return asset
