from pathlib import Path

import pytest

from billing_docs.exceptions import AssetLoadFailure
from billing_docs.infra.assets import InMemoryAssetProvider, LocalAssetProvider
from billing_docs.infra.pdf_generator import embed_fonts, open_logo


def test_local_asset_provider_reads_files(tmp_path: Path, font_bytes) -> None:
    regular, bold = font_bytes
    (tmp_path / "regular.ttf").write_bytes(regular)
    (tmp_path / "bold.ttf").write_bytes(bold)
    (tmp_path / "logo.png").write_bytes(b"logo-bytes")

    provider = LocalAssetProvider(tmp_path / "regular.ttf", tmp_path / "bold.ttf", tmp_path / "logo.png")

    assert provider.load_font("regular") == regular
    assert provider.load_font("bold") == bold
    assert provider.load_logo() == b"logo-bytes"


def test_missing_font_raises(tmp_path: Path) -> None:
    provider = LocalAssetProvider(tmp_path / "missing.ttf", tmp_path / "missing-bold.ttf")

    with pytest.raises(AssetLoadFailure):
        provider.load_font("regular")


def test_empty_font_file_raises(tmp_path: Path) -> None:
    (tmp_path / "empty.ttf").write_bytes(b"")
    provider = LocalAssetProvider(tmp_path / "empty.ttf", tmp_path / "empty.ttf")

    with pytest.raises(AssetLoadFailure):
        provider.load_font("bold")


def test_unknown_variant_raises(font_bytes) -> None:
    provider = InMemoryAssetProvider(*font_bytes)

    with pytest.raises(AssetLoadFailure):
        provider.load_font("italic")


def test_missing_logo_is_optional(tmp_path: Path) -> None:
    provider = LocalAssetProvider(tmp_path / "r.ttf", tmp_path / "b.ttf", tmp_path / "nope.png")

    assert provider.load_logo() is None
    assert LocalAssetProvider(tmp_path / "r.ttf", tmp_path / "b.ttf").load_logo() is None


def test_embed_fonts_is_stable_for_same_bytes(assets) -> None:
    first = embed_fonts(assets)
    second = embed_fonts(assets)

    assert first == second
    assert first.regular != first.bold
    assert first.regular.startswith("Doc-Regular-")


def test_open_logo_rejects_garbage() -> None:
    assert open_logo(None) is None
    assert open_logo(b"") is None
    assert open_logo(b"not an image at all") is None
