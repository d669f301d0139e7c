from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from billing_docs.config import settings
from billing_docs.exceptions import AssetLoadFailure

logger = logging.getLogger(__name__)

FONT_VARIANTS = ("regular", "bold")


class AssetProvider(ABC):
    """폰트/로고 등 정적 에셋 공급자 추상화.

    테스트에서는 InMemoryAssetProvider 로 실제 파일 없이 대체할 수 있다.
    """

    @abstractmethod
    def load_font(self, variant: str) -> bytes:
        """TTF 폰트 바이트를 반환한다. variant 는 "regular" 또는 "bold".

        읽을 수 없으면 AssetLoadFailure 를 던진다.
        """

    @abstractmethod
    def load_logo(self) -> Optional[bytes]:
        """브랜드 로고 이미지 바이트를 반환한다 (없으면 None)."""


def _check_variant(variant: str) -> None:
    if variant not in FONT_VARIANTS:
        raise AssetLoadFailure(f"Unknown font variant: {variant!r}")


class LocalAssetProvider(AssetProvider):
    """로컬 파일 시스템 기반 AssetProvider 구현.

    호출마다 파일을 새로 읽는다. 캐시가 필요하면 호출자가 감싼다.
    """

    def __init__(
        self,
        font_regular_path: str | Path,
        font_bold_path: str | Path,
        logo_path: Optional[str | Path] = None,
    ) -> None:
        self._font_paths = {
            "regular": Path(font_regular_path),
            "bold": Path(font_bold_path),
        }
        self._logo_path = Path(logo_path) if logo_path else None

    def load_font(self, variant: str) -> bytes:
        _check_variant(variant)
        path = self._font_paths[variant]
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise AssetLoadFailure(f"Cannot read {variant} font at {path}: {exc}") from exc
        if not data:
            raise AssetLoadFailure(f"Font file is empty: {path}")
        return data

    def load_logo(self) -> Optional[bytes]:
        if self._logo_path is None:
            return None
        try:
            return self._logo_path.read_bytes()
        except OSError:
            logger.debug("Logo not available at %s, using text fallback", self._logo_path)
            return None


class InMemoryAssetProvider(AssetProvider):
    """메모리에 올려 둔 바이트를 그대로 돌려주는 AssetProvider."""

    def __init__(self, regular: bytes, bold: bytes, logo: Optional[bytes] = None) -> None:
        self._fonts = {"regular": regular, "bold": bold}
        self._logo = logo

    def load_font(self, variant: str) -> bytes:
        _check_variant(variant)
        data = self._fonts[variant]
        if not data:
            raise AssetLoadFailure(f"No {variant} font data supplied")
        return data

    def load_logo(self) -> Optional[bytes]:
        return self._logo


def get_asset_provider() -> AssetProvider:
    """현재 설정에 따른 AssetProvider 인스턴스를 반환한다."""

    return LocalAssetProvider(
        font_regular_path=settings.font_regular_path,
        font_bold_path=settings.font_bold_path,
        logo_path=settings.logo_path or None,
    )
