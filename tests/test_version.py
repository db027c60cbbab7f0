"""Tests for version helpers."""

import pitchsense
from pitchsense import version


def test_version_getter_returns_package_version():
    assert version.get_package_version() == version.PACKAGE_VERSION


def test_package_exposes_version():
    assert pitchsense.__version__ == version.PACKAGE_VERSION
