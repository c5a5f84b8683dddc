import io
from decimal import Decimal

import pytest
from werkzeug.datastructures import FileStorage

from src.school_admin.school_admin.common.uploads import save_photo
from src.school_admin.school_admin.common.validators import filter_filled, parse_id_list, require_int
from src.school_admin.school_admin.core.exceptions import ValidationError


def test_parse_id_list_skips_blanks_and_duplicates():
    assert parse_id_list(["3", "", None, 1, "3", " "], "Branch") == [3, 1]
    assert parse_id_list(None, "Branch") == []


def test_parse_id_list_rejects_non_integers():
    with pytest.raises(ValidationError, match="Branch is not a valid id"):
        parse_id_list(["1", "x"], "Branch")


def test_require_int_rejects_bool():
    with pytest.raises(ValidationError):
        require_int(True, "User")


def test_filter_filled_keeps_allowed_non_empty():
    data = {"display_name": " Lan ", "phone": "", "address": None, "is_admin": "1"}

    assert filter_filled(data, ("display_name", "phone", "address")) == {"display_name": "Lan"}


def test_save_photo_uses_safe_name(tmp_path):
    upload = FileStorage(stream=io.BytesIO(b"img"), filename="../../me photo.PNG")

    saved = save_photo(upload, str(tmp_path))

    assert "/" not in saved and ".." not in saved
    assert saved.lower().endswith(".png")
    assert (tmp_path / saved).read_bytes() == b"img"


def test_save_photo_rejects_other_types(tmp_path):
    upload = FileStorage(stream=io.BytesIO(b"x"), filename="script.exe")

    with pytest.raises(ValidationError):
        save_photo(upload, str(tmp_path))


@pytest.mark.parametrize("value", [2.9, Decimal("2.5"), float("inf"), float("nan"), "2.0", "two"])
def test_require_int_rejects_non_integers(value):
    with pytest.raises(ValidationError):
        require_int(value, "Subject")


@pytest.mark.parametrize("value, expected", [(3, 3), ("7", 7), (" 8 ", 8), (4.0, 4), (Decimal("5"), 5)])
def test_require_int_accepts_integral_values(value, expected):
    assert require_int(value, "Subject") == expected
