#!/usr/bin/env python3
"""Tests for clipboard backend selection."""
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from clipaccum.clipboard_resource import open_clipboard, resolve_backend


def test_resolve_auto_per_platform() -> None:
    """Test auto picks macos on darwin and x11 elsewhere."""
    assert resolve_backend("auto", "darwin") == "macos"
    assert resolve_backend("auto", "linux") == "x11"
    assert resolve_backend("auto", "freebsd13") == "x11"


def test_resolve_explicit() -> None:
    """Test explicit names are kept."""
    assert resolve_backend("x11", "darwin") == "x11"
    assert resolve_backend("macos", "linux") == "macos"


def test_resolve_unknown() -> None:
    """Test unknown names raise ValueError."""
    with pytest.raises(ValueError):
        resolve_backend("wayland")


@pytest.mark.asyncio
async def test_open_x11() -> None:
    """Test opening the x11 backend."""
    opened = MagicMock()
    with patch("clipaccum.x11_clipboard.X11Clipboard.open", new_callable=AsyncMock) as mock_open:
        mock_open.return_value = opened
        assert await open_clipboard("x11") is opened


@pytest.mark.asyncio
async def test_open_macos() -> None:
    """Test opening the macos backend."""
    opened = MagicMock()
    with patch("clipaccum.macos_clipboard.MacClipboard.open", return_value=opened):
        assert await open_clipboard("macos") is opened
