"""Tests for identifier validation helpers."""

from __future__ import annotations

import pytest

from hostshare.access.exceptions import InvalidArgumentError
from hostshare.access.permissions import AccessLevel
from hostshare.access.utils import (
    normalize_folder_name,
    parse_access_level,
    require_host_id,
    require_share_id,
    require_user_id,
)


class TestRequireUserId:
    def test_valid(self) -> None:
        assert require_user_id("u1") == "u1"

    @pytest.mark.parametrize("value", ["", "   ", None, 5, "a\nb"])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(InvalidArgumentError):
            require_user_id(value)

    def test_field_name_in_message(self) -> None:
        with pytest.raises(InvalidArgumentError, match="owner_id"):
            require_user_id("", "owner_id")


class TestRequireHostId:
    def test_valid(self) -> None:
        assert require_host_id(3) == 3

    @pytest.mark.parametrize("value", [0, -1, "3", None, True, 1.5])
    def test_invalid(self, value: object) -> None:
        with pytest.raises(InvalidArgumentError):
            require_host_id(value)


class TestRequireShareId:
    def test_invalid(self) -> None:
        with pytest.raises(InvalidArgumentError):
            require_share_id("")


class TestNormalizeFolderName:
    def test_none_is_empty(self) -> None:
        assert normalize_folder_name(None) == ""

    def test_kept_verbatim(self) -> None:
        assert normalize_folder_name(" prod ") == " prod "

    def test_non_string(self) -> None:
        with pytest.raises(InvalidArgumentError):
            normalize_folder_name(3)  # type: ignore[arg-type]


class TestParseAccessLevel:
    def test_viewer(self) -> None:
        assert parse_access_level("viewer") is AccessLevel.VIEWER
        assert parse_access_level(AccessLevel.VIEWER) is AccessLevel.VIEWER

    def test_only_one_level(self) -> None:
        assert len(AccessLevel) == 1

    @pytest.mark.parametrize("value", ["editor", "write", "admin"])
    def test_unknown(self, value: str) -> None:
        with pytest.raises(InvalidArgumentError):
            parse_access_level(value)

    def test_invalid_argument_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            parse_access_level("owner")
